"""The moderation blueprint."""

from flask import Blueprint

bp = Blueprint("moderation", __name__, url_prefix="/api/moderation")

from . import routes  # noqa: E402
from .services import ModerationService  # noqa: E402

__all__ = ["ModerationService", "routes"]
