"""Result types for AI analyses."""

from __future__ import annotations

import datetime
import json
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


class AnalysisKind(str, Enum):
    BATTLE_JUDGE = "battle_judge"
    PERFORMANCE_AUDIO = "performance_audio"
    CONTENT_MODERATION = "content_moderation"
    CYPHER_PERFORMANCE = "cypher_performance"
    BEAT_SUGGESTIONS = "beat_suggestions"


# Response key for the raw text of each kind of analysis.
RESULT_KEYS = {
    AnalysisKind.BATTLE_JUDGE: "judgment",
    AnalysisKind.PERFORMANCE_AUDIO: "analysis",
    AnalysisKind.CONTENT_MODERATION: "moderation",
    AnalysisKind.CYPHER_PERFORMANCE: "analysis",
    AnalysisKind.BEAT_SUGGESTIONS: "suggestions",
}


def _now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


@dataclass
class AnalysisResult:
    """Outcome of one analysis call, tagged by what was analysed."""

    kind: AnalysisKind
    success: bool
    text: Optional[str] = None
    error: Optional[str] = None
    timestamp: str = field(default_factory=_now_iso)

    def parsed(self) -> Any:
        """Extract the JSON value from the model's text, or None."""
        if not self.text:
            return None
        match = _FENCE.search(self.text)
        candidate = match.group(1) if match else self.text

        starts = [i for i in (candidate.find("{"), candidate.find("[")) if i != -1]
        if not starts:
            return None
        try:
            value, _ = json.JSONDecoder().raw_decode(candidate[min(starts):])
        except json.JSONDecodeError:
            return None
        return value

    def to_dict(self) -> dict[str, Any]:
        if not self.success:
            return {
                "success": False,
                "kind": self.kind.value,
                "error": self.error,
                "timestamp": self.timestamp,
            }
        return {
            "success": True,
            "kind": self.kind.value,
            RESULT_KEYS[self.kind]: self.text,
            "parsed": self.parsed(),
            "timestamp": self.timestamp,
        }
