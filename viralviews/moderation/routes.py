"""Routes for the moderation blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import g, jsonify, request

from viralviews.ai.client import get_client
from viralviews.auth.decorators import login_required
from viralviews.core.forms import validate_payload
from viralviews.extensions import api_limit

from . import bp
from .forms import ModerationActionForm
from .services import ModerationService


@bp.route("/queue", methods=["GET"])
@api_limit
@login_required(admin_required=True)
def queue() -> Any:
    db = firestore.client()
    items = ModerationService.get_queue(db, request.args.get("status"))
    return jsonify({"success": True, "queue": items})


@bp.route("/stats", methods=["GET"])
@api_limit
@login_required(admin_required=True)
def stats() -> Any:
    db = firestore.client()
    return jsonify({"success": True, "stats": ModerationService.get_stats(db)})


@bp.route("/<string:media_id>", methods=["POST"])
@api_limit
@login_required(admin_required=True)
def moderate(media_id: str) -> Any:
    """Approve, reject or flag a media item."""
    form = validate_payload(ModerationActionForm, request.get_json(silent=True))
    db = firestore.client()
    media = ModerationService.moderate(
        db, media_id, g.auth, form.action.data, form.reason.data or None
    )
    return jsonify({"success": True, "media": media})


@bp.route("/<string:media_id>/screen", methods=["POST"])
@api_limit
@login_required(admin_required=True)
def screen(media_id: str) -> Any:
    """Run AI screening on a media item. Does not change its status."""
    db = firestore.client()
    result = ModerationService.screen_item(db, media_id, get_client())
    return jsonify({"success": True, "screening": result.to_dict()})
