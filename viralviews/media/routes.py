"""Routes for the media blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import current_app, g, jsonify, request

from viralviews.auth.decorators import login_required
from viralviews.constants import MEDIA_CATEGORIES
from viralviews.core.forms import validate_payload
from viralviews.errors import ValidationError
from viralviews.extensions import api_limit, upload_limit

from . import bp
from .forms import MediaUpdateForm, MediaUploadForm
from .services import MediaService


@bp.route("", methods=["POST"])
@upload_limit
@login_required
def upload_media() -> Any:
    """Create a media item from a JSON body or a multipart upload."""
    media_file = request.files.get("file")
    payload = request.form if media_file else request.get_json(silent=True)
    form = validate_payload(MediaUploadForm, payload)

    db = firestore.client()
    media_id, media = MediaService.upload_media(db, form.data, g.auth, media_file)
    current_app.logger.info(f"Media {media_id} awaiting moderation")
    return jsonify({"success": True, "mediaId": media_id, "media": media}), 201


@bp.route("", methods=["GET"])
@api_limit
def list_media() -> Any:
    category = request.args.get("category")
    if category and category not in MEDIA_CATEGORIES:
        raise ValidationError(
            details=[{"path": ["category"], "message": "Not a valid category."}]
        )
    db = firestore.client()
    items = MediaService.list_media(
        db, g.auth, category=category, limit=current_app.config["MEDIA_LIST_LIMIT"]
    )
    return jsonify({"success": True, "media": items})


@bp.route("/<string:media_id>", methods=["GET"])
@api_limit
def get_media(media_id: str) -> Any:
    db = firestore.client()
    return jsonify({"success": True, "media": MediaService.get_media(db, media_id, g.auth)})


@bp.route("/<string:media_id>", methods=["PATCH"])
@api_limit
@login_required
def update_media(media_id: str) -> Any:
    form = validate_payload(MediaUpdateForm, request.get_json(silent=True))
    db = firestore.client()
    media = MediaService.update_media(db, media_id, g.auth, form.changes())
    return jsonify({"success": True, "media": media})


@bp.route("/<string:media_id>", methods=["DELETE"])
@api_limit
@login_required
def delete_media(media_id: str) -> Any:
    db = firestore.client()
    MediaService.delete_media(db, media_id, g.auth)
    return jsonify({"success": True})


@bp.route("/<string:media_id>/view", methods=["POST"])
@api_limit
def record_view(media_id: str) -> Any:
    db = firestore.client()
    MediaService.record_view(db, media_id, g.auth)
    return jsonify({"success": True})


@bp.route("/<string:media_id>/like", methods=["POST"])
@api_limit
@login_required
def like_media(media_id: str) -> Any:
    db = firestore.client()
    MediaService.like_media(db, media_id, g.auth)
    return jsonify({"success": True})
