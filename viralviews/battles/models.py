"""Data models for the battles blueprint."""

from __future__ import annotations

from typing import Any, Optional, TypedDict

from viralviews.core.types import FirestoreDocument


class Performance(TypedDict, total=False):
    """A participant's submitted performance."""

    content: str
    submittedAt: Any
    votes: int


class Participant(TypedDict, total=False):
    """A user who joined a battle. List order is join order."""

    userId: str
    displayName: str
    photoURL: Optional[str]
    joinedAt: Any
    performance: Performance


class Vote(TypedDict):
    """One spectator's vote."""

    voterId: str
    participantId: str
    createdAt: Any


class Battle(FirestoreDocument, total=False):
    """A battle document in Firestore."""

    title: str
    description: str
    format: str
    timeLimit: int
    maxParticipants: int
    isPublic: bool
    createdBy: str
    status: str
    participants: list[Participant]
    participantIds: list[str]
    votes: list[Vote]
    voterIds: list[str]
    winner: Optional[str]
    voteTally: dict[str, int]
    version: int


class ChatMessage(FirestoreDocument, total=False):
    """A chat message in a battle's messages sub-collection."""

    battleId: str
    userId: str
    username: str
    message: str
    type: str
    timestamp: Any
