"""Pure helpers for battle documents."""

from __future__ import annotations

import datetime
from collections import Counter
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from viralviews.core.types import AuthContext

    from .models import Battle, Participant


def utcnow() -> datetime.datetime:
    """Concrete timestamp for values nested in arrays, where sentinels are not allowed."""
    return datetime.datetime.now(datetime.timezone.utc)


def make_participant(user: AuthContext) -> Participant:
    return {
        "userId": user["uid"],
        "displayName": user.get("displayName") or "Anonymous",
        "photoURL": user.get("photoURL"),
        "joinedAt": utcnow(),
    }


def participant_ids(battle: Battle | dict[str, Any]) -> list[str]:
    return [p["userId"] for p in battle.get("participants", [])]


def find_participant(
    battle: Battle | dict[str, Any], user_id: str
) -> Optional[Participant]:
    for participant in battle.get("participants", []):
        if participant.get("userId") == user_id:
            return participant
    return None


def all_submitted(participants: list[Participant]) -> bool:
    return bool(participants) and all(p.get("performance") for p in participants)


def tally_votes(battle: Battle | dict[str, Any]) -> dict[str, int]:
    """Count votes per participant; every participant appears, even with zero."""
    counts = Counter(v["participantId"] for v in battle.get("votes", []))
    return {uid: counts.get(uid, 0) for uid in participant_ids(battle)}


def determine_winner(tally: dict[str, int]) -> Optional[str]:
    """Return the unique top vote-getter, or None on a tie or no votes."""
    if not tally:
        return None
    top = max(tally.values())
    if top == 0:
        return None
    leaders = [uid for uid, count in tally.items() if count == top]
    return leaders[0] if len(leaders) == 1 else None
