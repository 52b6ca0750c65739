"""Service layer for media items."""

from __future__ import annotations

import logging
import os
import tempfile
from typing import TYPE_CHECKING, Any, Optional, cast

from firebase_admin import firestore, storage
from google.api_core import exceptions as google_exceptions
from werkzeug.utils import secure_filename

from viralviews import rules
from viralviews.constants import (
    MEDIA_COLLECTION,
    MEDIA_PENDING,
    PLACEHOLDER_MEDIA_BASE_URL,
    USERS_COLLECTION,
)
from viralviews.errors import ExternalServiceError, NotFoundError

from .models import MediaItem

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference

    from viralviews.core.types import AuthContext

logger = logging.getLogger(__name__)


def media_type_for(category: str, content_type: Optional[str] = None) -> str:
    """Video or audio, from the upload's content type when there is one."""
    if content_type:
        return "video" if content_type.startswith("video/") else "audio"
    return "video" if category == "battle" else "audio"


class MediaService:
    """Handles business logic and data access for media items."""

    @staticmethod
    def _snapshot(db: Client, media_id: str) -> tuple[DocumentReference, MediaItem]:
        ref = db.collection(MEDIA_COLLECTION).document(media_id)
        doc = cast("DocumentSnapshot", ref.get())
        if not doc.exists:
            raise NotFoundError("Media not found.")
        data = cast("MediaItem", doc.to_dict() or {})
        data["id"] = doc.id
        return ref, data

    @staticmethod
    def _upload_file(uid: str, media_id: str, media_file: Any) -> str:
        """Upload the file to Cloud Storage and return its public URL."""
        filename = secure_filename(media_file.filename or f"{media_id}.bin")
        bucket = storage.bucket()
        blob = bucket.blob(f"media/{uid}/{media_id}/{filename}")

        try:
            with tempfile.NamedTemporaryFile(suffix=os.path.splitext(filename)[1]) as tmp:
                media_file.save(tmp.name)
                blob.upload_from_filename(tmp.name, content_type=media_file.mimetype)
            blob.make_public()
        except (google_exceptions.GoogleAPIError, OSError) as e:
            logger.error(f"Media upload failed for {media_id}: {e}")
            raise ExternalServiceError("Upload failed") from e
        return str(blob.public_url)

    @staticmethod
    def upload_media(
        db: Client,
        data: dict[str, Any],
        user: AuthContext,
        media_file: Any = None,
    ) -> tuple[str, MediaItem]:
        """Create a media item awaiting moderation and return its ID and document."""
        uid = user["uid"]
        ref = db.collection(MEDIA_COLLECTION).document()
        category = data["category"]

        payload: dict[str, Any] = {
            "title": data["title"],
            "description": data.get("description") or "",
            "category": category,
            "tags": data.get("tags") or [],
            "privacy": data.get("privacy") or "public",
            "userId": uid,
            "uploadedAt": firestore.SERVER_TIMESTAMP,
            "status": MEDIA_PENDING,
            "moderationStatus": {
                "reviewed": False,
                "approved": False,
                "reviewedAt": None,
                "reviewedBy": None,
                "reason": None,
            },
            "stats": {"views": 0, "likes": 0, "comments": 0, "shares": 0},
            "metadata": {"fileSize": 0, "duration": 0, "dimensions": None},
        }
        rules.enforce(rules.can_create_media(user, payload))

        if media_file is not None and getattr(media_file, "filename", None):
            payload["mediaUrl"] = MediaService._upload_file(uid, ref.id, media_file)
            payload["mediaType"] = media_type_for(category, media_file.mimetype)
            payload["metadata"]["fileSize"] = media_file.content_length or 0
        else:
            payload["mediaUrl"] = (
                data.get("mediaUrl") or f"{PLACEHOLDER_MEDIA_BASE_URL}/{uid}/{ref.id}"
            )
            payload["mediaType"] = media_type_for(category)

        ref.set(payload)
        logger.info(f"Media {ref.id} uploaded by {uid}")
        _, media = MediaService._snapshot(db, str(ref.id))
        return str(ref.id), media

    @staticmethod
    def get_media(db: Client, media_id: str, auth: Optional[AuthContext]) -> MediaItem:
        _, media = MediaService._snapshot(db, media_id)
        rules.enforce(rules.can_read_media(auth, dict(media)))
        return media

    @staticmethod
    def list_media(
        db: Client,
        auth: Optional[AuthContext],
        category: Optional[str] = None,
        limit: int = 20,
    ) -> list[MediaItem]:
        """Public media plus the caller's own, newest first."""
        queries = [
            db.collection(MEDIA_COLLECTION).where(
                filter=firestore.FieldFilter("privacy", "==", "public")
            )
        ]
        if auth:
            queries.append(
                db.collection(MEDIA_COLLECTION).where(
                    filter=firestore.FieldFilter("userId", "==", auth["uid"])
                )
            )

        items: dict[str, MediaItem] = {}
        for query in queries:
            if category:
                query = query.where(
                    filter=firestore.FieldFilter("category", "==", category)
                )
            query = query.order_by(
                "uploadedAt", direction=firestore.Query.DESCENDING
            ).limit(limit)
            for doc in query.stream():
                data = cast("MediaItem", doc.to_dict() or {})
                data["id"] = doc.id
                items[doc.id] = data

        ordered = sorted(
            items.values(), key=lambda m: m.get("uploadedAt") or 0, reverse=True
        )
        return ordered[:limit]

    @staticmethod
    def update_media(
        db: Client, media_id: str, auth: Optional[AuthContext], changes: dict[str, Any]
    ) -> MediaItem:
        ref, before = MediaService._snapshot(db, media_id)
        after = {**before, **changes}
        rules.enforce(rules.can_update_media(auth, dict(before), after))
        ref.update({**changes, "updatedAt": firestore.SERVER_TIMESTAMP})
        return cast("MediaItem", after)

    @staticmethod
    def delete_media(db: Client, media_id: str, auth: Optional[AuthContext]) -> None:
        """Delete a media item. Owners and admins only."""
        ref, media = MediaService._snapshot(db, media_id)
        rules.enforce(rules.can_delete_media(auth, dict(media)))
        ref.delete()
        logger.info(f"Media {media_id} deleted by {auth['uid'] if auth else None}")

    @staticmethod
    def _bump(
        db: Client, media_id: str, auth: Optional[AuthContext], counter: str, owner_counter: str
    ) -> None:
        ref, media = MediaService._snapshot(db, media_id)
        rules.enforce(rules.can_read_media(auth, dict(media)))

        batch = db.batch()
        batch.update(ref, {f"stats.{counter}": firestore.Increment(1)})
        owner_ref = db.collection(USERS_COLLECTION).document(media["userId"])
        if cast("DocumentSnapshot", owner_ref.get()).exists:
            batch.update(owner_ref, {f"stats.{owner_counter}": firestore.Increment(1)})
        batch.commit()

    @staticmethod
    def record_view(db: Client, media_id: str, auth: Optional[AuthContext]) -> None:
        MediaService._bump(db, media_id, auth, "views", "totalViews")

    @staticmethod
    def like_media(db: Client, media_id: str, auth: AuthContext) -> None:
        MediaService._bump(db, media_id, auth, "likes", "totalLikes")
