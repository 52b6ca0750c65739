"""The media blueprint."""

from flask import Blueprint

bp = Blueprint("media", __name__, url_prefix="/api/media")

from . import routes  # noqa: E402
from .models import MediaItem  # noqa: E402
from .services import MediaService  # noqa: E402

__all__ = ["MediaItem", "MediaService", "routes"]
