"""Routes for the users blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import g, jsonify, request

from viralviews.auth.decorators import login_required
from viralviews.core.forms import validate_payload
from viralviews.extensions import api_limit

from . import bp
from .forms import ProfileForm
from .services import UserService


@bp.route("/<string:user_id>", methods=["GET"])
@api_limit
@login_required
def get_profile(user_id: str) -> Any:
    """Return the caller's own profile."""
    db = firestore.client()
    profile = UserService.get_profile(db, user_id, g.auth)
    return jsonify({"success": True, "user": profile})


@bp.route("/<string:user_id>", methods=["PATCH"])
@api_limit
@login_required
def update_profile(user_id: str) -> Any:
    """Edit the caller's own profile."""
    form = validate_payload(ProfileForm, request.get_json(silent=True))
    db = firestore.client()
    profile = UserService.update_profile(db, user_id, g.auth, form.changes())
    return jsonify({"success": True, "user": profile})
