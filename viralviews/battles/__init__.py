"""The battles blueprint."""

from flask import Blueprint

bp = Blueprint("battles", __name__, url_prefix="/api/battles")

from . import routes  # noqa: E402
from .services import BattleService  # noqa: E402

__all__ = ["BattleService", "routes"]
