"""AI analyses built on the generation client.

Every function makes a single generation call and returns an
:class:`AnalysisResult`. Failures are logged and come back as unsuccessful
results rather than exceptions, so callers can store or return them as-is.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from viralviews.errors import ExternalServiceError, ValidationError

from . import prompts
from .models import AnalysisKind, AnalysisResult

if TYPE_CHECKING:
    from viralviews.battles.models import Battle

    from .client import GenerationClient

logger = logging.getLogger(__name__)

# (temperature, max output tokens) per kind of analysis.
GENERATION_SETTINGS = {
    AnalysisKind.BATTLE_JUDGE: (0.7, 1500),
    AnalysisKind.PERFORMANCE_AUDIO: (0.6, 1200),
    AnalysisKind.CONTENT_MODERATION: (0.3, 800),
    AnalysisKind.CYPHER_PERFORMANCE: (0.7, 1200),
    AnalysisKind.BEAT_SUGGESTIONS: (0.8, 800),
}

FAILURE_MESSAGES = {
    AnalysisKind.BATTLE_JUDGE: "Failed to generate battle judgment",
    AnalysisKind.PERFORMANCE_AUDIO: "Failed to analyze performance audio",
    AnalysisKind.CONTENT_MODERATION: "Failed to analyze content for moderation",
    AnalysisKind.CYPHER_PERFORMANCE: "Failed to analyze cypher performance",
    AnalysisKind.BEAT_SUGGESTIONS: "Failed to generate beat suggestions",
}


def _run(client: GenerationClient, kind: AnalysisKind, prompt: str) -> AnalysisResult:
    temperature, max_tokens = GENERATION_SETTINGS[kind]
    try:
        text = client.generate(prompt, temperature, max_tokens)
    except ExternalServiceError as e:
        logger.error(f"{kind.value} analysis failed: {e.message}")
        return AnalysisResult(kind=kind, success=False, error=FAILURE_MESSAGES[kind])
    return AnalysisResult(kind=kind, success=True, text=text)


def judge_battle(
    client: GenerationClient,
    participant1: str,
    performance1: str,
    participant2: str,
    performance2: str,
) -> AnalysisResult:
    prompt = prompts.battle_judge_prompt(
        participant1, performance1, participant2, performance2
    )
    return _run(client, AnalysisKind.BATTLE_JUDGE, prompt)


def battle_performances(battle: Battle) -> tuple[str, str, str, str]:
    """The first two submitted performances of a battle, in join order."""
    submitted = [
        p for p in battle.get("participants", []) if p.get("performance", {}).get("content")
    ]
    if len(submitted) < 2:
        raise ValidationError("The battle needs two submitted performances to judge.")
    first, second = submitted[:2]
    return (
        first.get("displayName") or first["userId"],
        first["performance"]["content"],
        second.get("displayName") or second["userId"],
        second["performance"]["content"],
    )


def analyze_performance_audio(
    client: GenerationClient, audio_url: str, transcript: Optional[str] = None
) -> AnalysisResult:
    prompt = prompts.performance_audio_prompt(audio_url, transcript)
    return _run(client, AnalysisKind.PERFORMANCE_AUDIO, prompt)


def moderate_content(
    client: GenerationClient, content: str, content_type: str = "text"
) -> AnalysisResult:
    prompt = prompts.content_moderation_prompt(content, content_type)
    return _run(client, AnalysisKind.CONTENT_MODERATION, prompt)


def analyze_cypher_performance(
    client: GenerationClient,
    participant_name: str,
    performance: str,
    context: Optional[dict[str, Any]] = None,
) -> AnalysisResult:
    context = context or {}
    prompt = prompts.cypher_performance_prompt(
        participant_name,
        performance,
        theme=context.get("theme"),
        previous_participants=context.get("previousParticipants"),
        beat_info=context.get("beatInfo"),
    )
    return _run(client, AnalysisKind.CYPHER_PERFORMANCE, prompt)


def suggest_beats(client: GenerationClient, style: str, mood: str) -> AnalysisResult:
    prompt = prompts.beat_suggestions_prompt(style, mood)
    return _run(client, AnalysisKind.BEAT_SUGGESTIONS, prompt)
