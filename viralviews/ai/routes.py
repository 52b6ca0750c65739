"""Routes for the AI analysis blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import current_app, jsonify, request

from viralviews.auth.decorators import login_required
from viralviews.battles.services import BattleService
from viralviews.core.forms import validate_payload
from viralviews.extensions import api_limit

from . import bp, services
from .client import get_client
from .forms import (
    AudioAnalysisForm,
    BeatSuggestionForm,
    CypherAnalysisForm,
    JudgeForm,
    ModerationForm,
)
from .models import AnalysisResult


def _respond(result: AnalysisResult) -> Any:
    if not result.success:
        current_app.logger.warning(f"AI {result.kind.value} returned an error")
    return jsonify(result.to_dict()), 200 if result.success else 500


@bp.route("/judge", methods=["POST"])
@api_limit
@login_required
def judge() -> Any:
    """Judge two performances, given directly or taken from a battle."""
    form = validate_payload(JudgeForm, request.get_json(silent=True))
    if form.battleId.data:
        battle = BattleService.get_battle(firestore.client(), form.battleId.data)
        performances = services.battle_performances(battle)
    else:
        performances = (
            form.participant1.data,
            form.performance1.data,
            form.participant2.data,
            form.performance2.data,
        )
    return _respond(services.judge_battle(get_client(), *performances))


@bp.route("/analyze-performance", methods=["POST"])
@api_limit
@login_required
def analyze_performance() -> Any:
    form = validate_payload(AudioAnalysisForm, request.get_json(silent=True))
    result = services.analyze_performance_audio(
        get_client(), form.audioUrl.data, form.transcript.data or None
    )
    return _respond(result)


@bp.route("/moderate", methods=["POST"])
@api_limit
@login_required
def moderate() -> Any:
    form = validate_payload(ModerationForm, request.get_json(silent=True))
    return _respond(
        services.moderate_content(get_client(), form.content.data, form.type.data)
    )


@bp.route("/analyze-cypher", methods=["POST"])
@api_limit
@login_required
def analyze_cypher() -> Any:
    form = validate_payload(CypherAnalysisForm, request.get_json(silent=True))
    context = {
        "theme": form.theme.data,
        "previousParticipants": form.previousParticipants.data,
        "beatInfo": form.beatInfo.data,
    }
    result = services.analyze_cypher_performance(
        get_client(), form.participantName.data, form.performance.data, context
    )
    return _respond(result)


@bp.route("/beat-suggestions", methods=["POST"])
@api_limit
@login_required
def beat_suggestions() -> Any:
    form = validate_payload(BeatSuggestionForm, request.get_json(silent=True))
    return _respond(services.suggest_beats(get_client(), form.style.data, form.mood.data))
