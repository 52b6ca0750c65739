"""The AI analysis blueprint."""

from flask import Blueprint

bp = Blueprint("ai", __name__, url_prefix="/api/ai")

from . import routes  # noqa: E402
from .client import GenerationClient, get_client  # noqa: E402
from .models import AnalysisKind, AnalysisResult  # noqa: E402

__all__ = ["AnalysisKind", "AnalysisResult", "GenerationClient", "get_client", "routes"]
