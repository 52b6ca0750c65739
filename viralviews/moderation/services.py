"""Service layer for the media moderation queue."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, cast

from firebase_admin import firestore

from viralviews.ai import services as ai_services
from viralviews.constants import (
    MEDIA_APPROVED,
    MEDIA_COLLECTION,
    MEDIA_FLAGGED,
    MEDIA_PENDING,
    MEDIA_REJECTED,
    MODERATION_ACTIONS,
)
from viralviews.errors import NotFoundError, ValidationError

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

    from viralviews.ai.client import GenerationClient
    from viralviews.ai.models import AnalysisResult
    from viralviews.core.types import AuthContext
    from viralviews.media.models import MediaItem

logger = logging.getLogger(__name__)

QUEUE_STATUSES = (MEDIA_PENDING, MEDIA_FLAGGED)
STATS_KEYS = {
    MEDIA_PENDING: "pending",
    MEDIA_APPROVED: "approved",
    MEDIA_REJECTED: "rejected",
    MEDIA_FLAGGED: "flagged",
}


class ModerationService:
    """Reads and decides on media awaiting review. Callers must be admins."""

    @staticmethod
    def get_queue(db: Client, status: Optional[str] = None) -> list[MediaItem]:
        """Items awaiting review, oldest first."""
        if status is not None and status not in QUEUE_STATUSES:
            raise ValidationError(
                details=[{"path": ["status"], "message": "Not a queue status."}]
            )
        statuses = [status] if status else list(QUEUE_STATUSES)

        items: list[MediaItem] = []
        for queue_status in statuses:
            query = db.collection(MEDIA_COLLECTION).where(
                filter=firestore.FieldFilter("status", "==", queue_status)
            )
            for doc in query.stream():
                data = cast("MediaItem", doc.to_dict() or {})
                data["id"] = doc.id
                items.append(data)
        items.sort(key=lambda m: m.get("uploadedAt") or 0)
        return items

    @staticmethod
    def get_stats(db: Client) -> dict[str, int]:
        """Count media items per moderation status."""
        counts = dict.fromkeys(STATS_KEYS.values(), 0)
        for doc in db.collection(MEDIA_COLLECTION).stream():
            key = STATS_KEYS.get((doc.to_dict() or {}).get("status"))
            if key:
                counts[key] += 1
        return counts

    @staticmethod
    def moderate(
        db: Client,
        media_id: str,
        moderator: AuthContext,
        action: str,
        reason: Optional[str] = None,
    ) -> MediaItem:
        """Apply approve, reject or flag to a media item."""
        if action not in MODERATION_ACTIONS:
            raise ValidationError(
                details=[{"path": ["action"], "message": "Not a valid choice."}]
            )
        ref = db.collection(MEDIA_COLLECTION).document(media_id)
        doc = cast("DocumentSnapshot", ref.get())
        if not doc.exists:
            raise NotFoundError("Media not found.")

        status = MODERATION_ACTIONS[action]
        updates: dict[str, Any] = {
            "status": status,
            "moderationStatus": {
                "reviewed": True,
                "approved": status == MEDIA_APPROVED,
                "reviewedAt": firestore.SERVER_TIMESTAMP,
                "reviewedBy": moderator["uid"],
                "reason": reason,
            },
        }
        ref.update(updates)
        logger.info(f"Media {media_id} {status} by {moderator['uid']}")

        media = cast("MediaItem", cast("DocumentSnapshot", ref.get()).to_dict() or {})
        media["id"] = media_id
        return media

    @staticmethod
    def screen_item(
        db: Client, media_id: str, ai_client: GenerationClient
    ) -> AnalysisResult:
        """Run AI content moderation on an item and store the outcome.

        The stored screening is advisory; the item's status is left alone.
        """
        ref = db.collection(MEDIA_COLLECTION).document(media_id)
        doc = cast("DocumentSnapshot", ref.get())
        if not doc.exists:
            raise NotFoundError("Media not found.")
        media = doc.to_dict() or {}

        content = "\n".join(
            part for part in (media.get("title"), media.get("description")) if part
        )
        result = ai_services.moderate_content(ai_client, content, "text")
        ref.update({"aiScreening": result.to_dict()})
        return result
