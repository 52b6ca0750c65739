"""Routes for the battles blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import current_app, g, jsonify, request

from viralviews.auth.decorators import login_required
from viralviews.constants import BATTLE_STATUSES
from viralviews.core.forms import validate_payload
from viralviews.errors import ValidationError
from viralviews.extensions import api_limit

from . import bp
from .forms import BattleCreateForm, ChatMessageForm, PerformanceForm, VoteForm
from .services import BattleService


@bp.route("", methods=["POST"])
@api_limit
@login_required
def create_battle() -> Any:
    """Create a new battle owned by the caller."""
    form = validate_payload(BattleCreateForm, request.get_json(silent=True))
    db = firestore.client()
    battle_id, battle = BattleService.create_battle(db, form.data, g.auth)
    return jsonify({"success": True, "battleId": battle_id, "battle": battle}), 201


@bp.route("", methods=["GET"])
@api_limit
def list_battles() -> Any:
    """List public battles, newest first."""
    status = request.args.get("status")
    if status and status not in BATTLE_STATUSES:
        raise ValidationError(
            details=[{"path": ["status"], "message": "Not a valid battle status."}]
        )
    max_limit = current_app.config["BATTLE_LIST_LIMIT"]
    limit = request.args.get("limit", max_limit, type=int)
    db = firestore.client()
    battles = BattleService.list_battles(
        db, status=status, limit=max(1, min(limit, max_limit))
    )
    return jsonify({"success": True, "battles": battles})


@bp.route("/<string:battle_id>", methods=["GET"])
@api_limit
def get_battle(battle_id: str) -> Any:
    db = firestore.client()
    return jsonify({"success": True, "battle": BattleService.get_battle(db, battle_id)})


@bp.route("/<string:battle_id>", methods=["DELETE"])
@api_limit
@login_required
def delete_battle(battle_id: str) -> Any:
    db = firestore.client()
    BattleService.delete_battle(db, battle_id, g.auth)
    return jsonify({"success": True})


@bp.route("/<string:battle_id>/join", methods=["POST"])
@api_limit
@login_required
def join_battle(battle_id: str) -> Any:
    db = firestore.client()
    battle = BattleService.join_battle(db, battle_id, g.auth)
    return jsonify({"success": True, "battle": battle})


@bp.route("/<string:battle_id>/submit", methods=["POST"])
@api_limit
@login_required
def submit_performance(battle_id: str) -> Any:
    form = validate_payload(PerformanceForm, request.get_json(silent=True))
    db = firestore.client()
    battle = BattleService.submit_performance(db, battle_id, g.auth, form.content.data)
    return jsonify({"success": True, "battle": battle})


@bp.route("/<string:battle_id>/vote", methods=["POST"])
@api_limit
@login_required
def vote(battle_id: str) -> Any:
    form = validate_payload(VoteForm, request.get_json(silent=True))
    db = firestore.client()
    battle = BattleService.vote(db, battle_id, g.auth, form.participantId.data)
    return jsonify({"success": True, "battle": battle})


@bp.route("/<string:battle_id>/complete", methods=["POST"])
@api_limit
@login_required
def complete_battle(battle_id: str) -> Any:
    """Close voting and record the winner. Creator only."""
    db = firestore.client()
    battle = BattleService.complete_battle(db, battle_id, g.auth)
    return jsonify(
        {
            "success": True,
            "battle": battle,
            "winner": battle.get("winner"),
            "voteTally": battle.get("voteTally", {}),
        }
    )


@bp.route("/<string:battle_id>/messages", methods=["GET"])
@api_limit
def list_messages(battle_id: str) -> Any:
    db = firestore.client()
    messages = BattleService.list_messages(db, battle_id)
    return jsonify({"success": True, "messages": messages})


@bp.route("/<string:battle_id>/messages", methods=["POST"])
@api_limit
@login_required
def post_message(battle_id: str) -> Any:
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        payload = {**payload, "battleId": battle_id}
    form = validate_payload(ChatMessageForm, payload)
    db = firestore.client()
    message = BattleService.post_message(
        db, battle_id, g.auth, form.message.data, form.type.data
    )
    return jsonify({"success": True, "message": message}), 201
