"""Service layer for user profiles."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, cast

from firebase_admin import firestore

from viralviews import rules
from viralviews.constants import USERS_COLLECTION
from viralviews.errors import NotFoundError

from .models import UserProfile

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

    from viralviews.core.types import AuthContext


def default_stats() -> dict[str, int]:
    return {
        "battlesWon": 0,
        "battlesLost": 0,
        "totalBattles": 0,
        "totalViews": 0,
        "totalLikes": 0,
    }


class UserService:
    """Handles data access for user profile documents."""

    @staticmethod
    def username_taken(db: Client, username: str) -> bool:
        """Check whether another account already uses this username."""
        existing = (
            db.collection(USERS_COLLECTION)
            .where(filter=firestore.FieldFilter("username", "==", username))
            .limit(1)
            .stream()
        )
        return next(iter(existing), None) is not None

    @staticmethod
    def create_profile(
        db: Client, auth_ctx: AuthContext, username: str, display_name: str
    ) -> UserProfile:
        """Create the users/{uid} document for a freshly registered account."""
        uid = auth_ctx["uid"]
        profile: dict[str, Any] = {
            "email": auth_ctx.get("email"),
            "username": username,
            "displayName": display_name,
            "createdAt": firestore.SERVER_TIMESTAMP,
            "updatedAt": firestore.SERVER_TIMESTAMP,
            "isActive": True,
            "isAdmin": False,
            "bio": "",
            "location": "",
            "socialLinks": {"instagram": "", "youtube": "", "soundcloud": "", "tiktok": ""},
            "stats": default_stats(),
            "preferences": {
                "emailNotifications": True,
                "pushNotifications": True,
                "privacy": "public",
            },
        }
        rules.enforce(rules.can_create_user(auth_ctx, uid, profile))
        db.collection(USERS_COLLECTION).document(uid).set(profile)
        return cast("UserProfile", {**profile, "uid": uid})

    @staticmethod
    def get_profile(db: Client, user_id: str, auth_ctx: Optional[AuthContext]) -> UserProfile:
        """Fetch a profile the caller is allowed to read."""
        rules.enforce(rules.can_read_user(auth_ctx, user_id))
        doc = cast("DocumentSnapshot", db.collection(USERS_COLLECTION).document(user_id).get())
        if not doc.exists:
            raise NotFoundError("User not found.")
        data = cast("UserProfile", doc.to_dict() or {})
        data["uid"] = user_id
        return data

    @staticmethod
    def update_profile(
        db: Client, user_id: str, auth_ctx: Optional[AuthContext], changes: dict[str, Any]
    ) -> UserProfile:
        """Apply owner-initiated edits to a profile."""
        rules.enforce(rules.is_account_owner(auth_ctx, user_id))
        ref = db.collection(USERS_COLLECTION).document(user_id)
        doc = cast("DocumentSnapshot", ref.get())
        if not doc.exists:
            raise NotFoundError("User not found.")
        before = doc.to_dict() or {}

        if "socialLinks" in changes:
            changes = {
                **changes,
                "socialLinks": {**before.get("socialLinks", {}), **changes["socialLinks"]},
            }
        after = {**before, **changes}
        rules.enforce(rules.can_update_user(auth_ctx, user_id, before, after))

        ref.update({**changes, "updatedAt": firestore.SERVER_TIMESTAMP})
        profile = cast("UserProfile", {**after, "uid": user_id})
        return profile
