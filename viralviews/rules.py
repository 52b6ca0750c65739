"""Access-rule predicates for the Firestore collections.

These mirror the declarative security rules deployed with the project, so the
service layer rejects the same reads and writes the datastore would. Each
predicate takes the caller's identity (``None`` for anonymous callers) and the
stored and/or incoming document data, and returns a bool.
"""

from __future__ import annotations

from typing import Any, Optional

from .constants import (
    MAX_DISPLAY_NAME_LENGTH,
    MAX_PARTICIPANTS,
    MAX_TAGS,
    MAX_TITLE_LENGTH,
    MAX_USERNAME_LENGTH,
    MEDIA_CATEGORIES,
    MEDIA_PRIVACY,
    MIN_USERNAME_LENGTH,
)
from .core.types import AuthContext
from .errors import PermissionDeniedError

Auth = Optional[AuthContext]

USER_REQUIRED_KEYS = {"email", "username", "displayName", "createdAt"}
USER_IMMUTABLE_KEYS = {"email", "createdAt", "uid"}
BATTLE_REQUIRED_KEYS = {"title", "createdBy", "status", "participants"}
MEDIA_REQUIRED_KEYS = {"title", "userId", "privacy", "category", "uploadedAt"}
MEDIA_IMMUTABLE_KEYS = {"userId", "uploadedAt"}


def _uid(auth: Auth) -> Optional[str]:
    return auth.get("uid") if auth else None


def _sized_str(value: Any, low: int, high: int) -> bool:
    return isinstance(value, str) and low <= len(value) <= high


def _changed_keys(before: dict[str, Any], after: dict[str, Any]) -> set[str]:
    keys = set(before) | set(after)
    return {k for k in keys if before.get(k) != after.get(k)}


def _participant_ids(battle: dict[str, Any]) -> list[str]:
    if "participantIds" in battle:
        return list(battle["participantIds"])
    ids = []
    for p in battle.get("participants", []):
        ids.append(p.get("userId") if isinstance(p, dict) else p)
    return ids


def enforce(allowed: bool) -> None:
    """Raise the generic rejection when a rule does not allow the request."""
    if not allowed:
        raise PermissionDeniedError()


# users/{userId}


def is_account_owner(auth: Auth, user_id: str) -> bool:
    return _uid(auth) is not None and _uid(auth) == user_id


def can_read_user(auth: Auth, user_id: str) -> bool:
    return is_account_owner(auth, user_id)


def can_create_user(auth: Auth, user_id: str, data: dict[str, Any]) -> bool:
    if not is_account_owner(auth, user_id):
        return False
    return (
        USER_REQUIRED_KEYS.issubset(data)
        and data.get("email") == auth.get("email")
        and _sized_str(data.get("username"), MIN_USERNAME_LENGTH, MAX_USERNAME_LENGTH)
        and _sized_str(data.get("displayName"), 1, MAX_DISPLAY_NAME_LENGTH)
    )


def can_update_user(
    auth: Auth, user_id: str, before: dict[str, Any], after: dict[str, Any]
) -> bool:
    if not is_account_owner(auth, user_id):
        return False
    return not (_changed_keys(before, after) & USER_IMMUTABLE_KEYS)


# battles/{battleId}: readable by anyone


def can_create_battle(auth: Auth, data: dict[str, Any]) -> bool:
    if _uid(auth) is None:
        return False
    return (
        BATTLE_REQUIRED_KEYS.issubset(data)
        and data.get("createdBy") == _uid(auth)
        and len(data.get("participants", [])) <= MAX_PARTICIPANTS
        and isinstance(data.get("title"), str)
        and len(data["title"]) <= MAX_TITLE_LENGTH
    )


def can_update_battle(
    auth: Auth, before: dict[str, Any], after: dict[str, Any]
) -> bool:
    uid = _uid(auth)
    if uid is None:
        return False
    if before.get("createdBy") == uid:
        return True

    was_participant = uid in _participant_ids(before)
    is_joining = uid in _participant_ids(after) and not was_participant
    if was_participant or is_joining:
        return True

    # A spectator may only grow the vote list.
    changed = _changed_keys(before, after) - {"version", "updatedAt"}
    return changed <= {"votes", "voterIds", "participants"} and len(
        after.get("votes", [])
    ) > len(before.get("votes", []))


def can_delete_battle(auth: Auth, battle: dict[str, Any]) -> bool:
    return _uid(auth) is not None and battle.get("createdBy") == _uid(auth)


# media/{mediaId}


def can_read_media(auth: Auth, media: dict[str, Any]) -> bool:
    privacy = media.get("privacy")
    if privacy == "public":
        return True
    if _uid(auth) is None:
        return False
    return media.get("userId") == _uid(auth) or privacy == "unlisted"


def can_create_media(auth: Auth, data: dict[str, Any]) -> bool:
    if _uid(auth) is None or data.get("userId") != _uid(auth):
        return False
    return (
        MEDIA_REQUIRED_KEYS.issubset(data)
        and _sized_str(data.get("title"), 1, MAX_TITLE_LENGTH)
        and data.get("privacy") in MEDIA_PRIVACY
        and data.get("category") in MEDIA_CATEGORIES
        and len(data.get("tags") or []) <= MAX_TAGS
    )


def can_update_media(
    auth: Auth, before: dict[str, Any], after: dict[str, Any]
) -> bool:
    if _uid(auth) is None or before.get("userId") != _uid(auth):
        return False
    return not (_changed_keys(before, after) & MEDIA_IMMUTABLE_KEYS)


def can_delete_media(auth: Auth, media: dict[str, Any]) -> bool:
    if _uid(auth) is None:
        return False
    return media.get("userId") == _uid(auth) or bool(auth.get("admin"))
