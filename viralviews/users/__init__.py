"""The users blueprint."""

from flask import Blueprint

bp = Blueprint("users", __name__, url_prefix="/api/users")

from . import routes  # noqa: E402
from .models import UserProfile  # noqa: E402
from .services import UserService  # noqa: E402

__all__ = ["UserProfile", "UserService", "routes"]
