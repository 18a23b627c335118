from __future__ import annotations

from enum import Enum
from typing import Optional

from core.config import ScoringConfig


class Feedback(str, Enum):
    excellent = "excellent"
    good = "good"
    keep_practicing = "keep_practicing"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    Feedback.excellent: "Excellent!",
    Feedback.good: "Good!",
    Feedback.keep_practicing: "Keep practicing!",
}


def grade_feedback(mse: Optional[float], config: Optional[ScoringConfig] = None) -> Optional[Feedback]:
    """Bucket a score for the subject; ``None`` when the trial had no score."""
    if mse is None:
        return None
    config = config or ScoringConfig()
    if mse < config.excellent_below:
        return Feedback.excellent
    if mse < config.good_below:
        return Feedback.good
    return Feedback.keep_practicing


def format_mse(mse: Optional[float]) -> str:
    if mse is None:
        return "N/A"
    return f"{mse:.1f}"
