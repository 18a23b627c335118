"""Shape-only deviation scoring for hand-drawn circles."""

from scoring.feedback import Feedback, format_mse, grade_feedback
from scoring.normalize import MIN_POINTS, normalize_shape
from scoring.resample import resample_radius_profile
from scoring.scorer import (
    ScoreResult,
    ShapeScorer,
    calculate_drawing_mse,
    calculate_mse,
    deviation_score,
    try_calculate_mse,
)

__all__ = [
    "Feedback",
    "MIN_POINTS",
    "ScoreResult",
    "ShapeScorer",
    "calculate_drawing_mse",
    "calculate_mse",
    "deviation_score",
    "format_mse",
    "grade_feedback",
    "normalize_shape",
    "resample_radius_profile",
    "try_calculate_mse",
]
