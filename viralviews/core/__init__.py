"""Core application components."""

from .forms import validate_payload
from .types import AuthContext, FirestoreDocument

__all__ = ["AuthContext", "FirestoreDocument", "validate_payload"]
