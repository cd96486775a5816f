"""
Learner modelling helpers.

The profile is always recomputed from the full session history; nothing
intermediate is stored. Difficulty derivation is what the ai-quiz route
uses to pick a question tier from whatever profile the client sends.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
import math
import re

PASSING_SCORE = 70

SKILL_COLORS = {
    "beginner": "#6366f1",
    "intermediate": "#f59e0b",
    "advanced": "#10b981",
}

SKILL_QUESTION_COUNTS = {
    "beginner": 3,
    "intermediate": 5,
    "advanced": 8,
}

SKILL_DIFFICULTY = {
    "beginner": "easy",
    "intermediate": "medium",
    "advanced": "hard",
}


@dataclass
class SessionHistoryEntry:
    topic: str
    score: float
    duration: float
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SessionHistoryEntry":
        return cls(
            topic=str(data.get("topic") or ""),
            score=_as_number(data.get("score")),
            duration=_as_number(data.get("duration")),
            timestamp=str(data.get("timestamp") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class LearnerProfile:
    skillLevel: str = "beginner"
    pace: str = "medium"
    consistency: str = "low"
    successRate: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _as_number(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(number) else number


def round_half_up(value: float) -> int:
    """Round halves up, the way Math.round does in the browser."""
    return int(math.floor(value + 0.5))


def analyze_learner_profile(history: Iterable[Union[SessionHistoryEntry, Mapping[str, Any]]]) -> LearnerProfile:
    """
    Derive a coarse learner profile from the complete session history.

    Args:
        history: Every recorded session, as entries or plain dicts

    Returns:
        LearnerProfile: skill level from the average score (<40, <70, else),
        pace from the average duration in seconds (<300, <900, else),
        consistency from the number of sessions (>10, >5, else) and the
        percentage of sessions scoring at least 70.
    """
    entries = [
        e if isinstance(e, SessionHistoryEntry) else SessionHistoryEntry.from_dict(e)
        for e in history
    ]
    if not entries:
        return LearnerProfile()

    count = len(entries)
    avg_score = sum(e.score for e in entries) / count
    avg_duration = sum(e.duration for e in entries) / count
    success_rate = sum(1 for e in entries if e.score >= PASSING_SCORE) / count

    if avg_score < 40:
        skill = "beginner"
    elif avg_score < 70:
        skill = "intermediate"
    else:
        skill = "advanced"

    if avg_duration < 300:
        pace = "fast"
    elif avg_duration < 900:
        pace = "medium"
    else:
        pace = "slow"

    if count > 10:
        consistency = "high"
    elif count > 5:
        consistency = "medium"
    else:
        consistency = "low"

    return LearnerProfile(
        skillLevel=skill,
        pace=pace,
        consistency=consistency,
        successRate=round_half_up(success_rate * 100),
    )


def difficulty_for_success_rate(success_rate: float) -> str:
    if success_rate >= 85:
        return "expert"
    if success_rate >= 70:
        return "hard"
    if success_rate >= 50:
        return "medium"
    return "easy"


def derive_difficulty(user_profile: Optional[Mapping[str, Any]]) -> str:
    """
    Pick the quiz difficulty tier for a learner profile.

    successRate is read as a leading integer ("85%" is 85); a missing,
    null or empty rate counts as 0. Thresholds are inclusive at 50, 70
    and 85. Only when a rate is given but has no leading integer does
    skillLevel decide (beginner/intermediate/advanced to easy/medium/hard),
    and without a usable skillLevel the tier is medium.
    """
    profile = user_profile or {}
    rate = profile.get("successRate")
    if rate is None or rate is False or rate == "" or (isinstance(rate, float) and math.isnan(rate)):
        rate = 0

    number = parse_leading_int(rate)
    if number is not None:
        return difficulty_for_success_rate(number)

    level = profile.get("skillLevel")
    if level:
        return SKILL_DIFFICULTY.get(str(level).lower(), "medium")
    return "medium"


_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def parse_leading_int(value: Any) -> Optional[int]:
    """Integer at the start of value, or None when there is none."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return None if math.isinf(value) or math.isnan(value) else int(value)
    if not isinstance(value, str):
        return None
    match = _LEADING_INT_RE.match(value)
    return int(match.group(1)) if match else None


def ui_color(skill_level: str) -> str:
    return SKILL_COLORS.get(skill_level, SKILL_COLORS["beginner"])


def question_count(skill_level: str) -> int:
    return SKILL_QUESTION_COUNTS.get(skill_level, 5)


class GapAnalyzer:
    """Tracks per-concept understanding (0-100) from assessment answers."""

    GAP_THRESHOLD = 50

    def __init__(self):
        self.understanding: Dict[str, int] = {}
        self.gaps: List[str] = []

    def assess_concept(self, concept: str, is_correct: bool) -> int:
        current = self.understanding.get(concept, 0)
        if is_correct:
            updated = min(100, current + 25)
        else:
            updated = max(0, current - 15)
        self.understanding[concept] = updated

        if updated < self.GAP_THRESHOLD:
            if concept not in self.gaps:
                self.gaps.append(concept)
        elif concept in self.gaps:
            self.gaps.remove(concept)
        return updated
