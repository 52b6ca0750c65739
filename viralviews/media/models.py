"""Data models for the media blueprint."""

from __future__ import annotations

from typing import Any, Optional, TypedDict

from viralviews.core.types import FirestoreDocument


class ModerationStatus(TypedDict, total=False):
    """Outcome of the last human review."""

    reviewed: bool
    approved: bool
    reviewedAt: Any
    reviewedBy: Optional[str]
    reason: Optional[str]


class MediaStats(TypedDict, total=False):
    views: int
    likes: int
    comments: int
    shares: int


class MediaMetadata(TypedDict, total=False):
    fileSize: int
    duration: int
    dimensions: Optional[dict[str, int]]


class MediaItem(FirestoreDocument, total=False):
    """A media document in Firestore."""

    title: str
    description: str
    mediaUrl: str
    mediaType: str
    category: str
    tags: list[str]
    privacy: str
    userId: str
    uploadedAt: Any
    status: str
    moderationStatus: ModerationStatus
    aiScreening: dict[str, Any]
    stats: MediaStats
    metadata: MediaMetadata
