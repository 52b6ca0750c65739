"""Core data types for the viralviews application."""

from typing import Any, Optional, TypedDict


class _FirestoreDocumentBase(TypedDict):
    id: str
    createdAt: Any


class FirestoreDocument(_FirestoreDocumentBase, total=False):
    """Generic Firestore document structure."""

    path: str
    updatedAt: Any


class AuthContext(TypedDict, total=False):
    """Identity of the caller, taken from a verified ID token."""

    uid: str
    email: Optional[str]
    admin: bool
    displayName: Optional[str]
    photoURL: Optional[str]

