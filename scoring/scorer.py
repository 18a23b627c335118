from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np

from core.config import DEFAULT_N_ANGLES, DEFAULT_TARGET_RADIUS, ScoringConfig
from core.errors import ScoringError
from scoring.normalize import normalize_shape
from scoring.resample import resample_radius_profile

logger = logging.getLogger(__name__)


def deviation_score(profile: np.ndarray, target_radius: float) -> float:
    """Mean squared difference between the radius profile and ``target_radius``."""
    diff = np.asarray(profile, dtype=float) - target_radius
    return float(np.mean(diff * diff))


def calculate_mse(
    points: Iterable,
    target_radius: float = DEFAULT_TARGET_RADIUS,
    n_angles: int = DEFAULT_N_ANGLES,
) -> float:
    """Shape-only deviation of a drawn circle from a perfect one.

    Translation and size are normalized away before resampling, so the result
    only reflects ovality, bumps and tremor. Point order is ignored.

    Raises:
        InsufficientData: fewer than three points.
        DegenerateShape: all points coincide.
    """
    normalized = normalize_shape(points, target_radius)
    profile = resample_radius_profile(normalized, n_angles)
    return deviation_score(profile, target_radius)


def try_calculate_mse(
    points: Iterable,
    target_radius: float = DEFAULT_TARGET_RADIUS,
    n_angles: int = DEFAULT_N_ANGLES,
) -> Optional[float]:
    try:
        return calculate_mse(points, target_radius, n_angles)
    except ScoringError as exc:
        logger.info("Drawing not scorable: %s", exc)
        return None


def calculate_drawing_mse(drawing, config: Optional[ScoringConfig] = None) -> float:
    config = config or ScoringConfig()
    return calculate_mse(drawing.points(), config.target_radius, config.n_angles)


@dataclass
class ScoreResult:
    mse: float
    profile: np.ndarray
    n_points: int


class ShapeScorer:
    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    def score(self, points: Iterable) -> float:
        return calculate_mse(points, self.config.target_radius, self.config.n_angles)

    def score_profile(self, points: Iterable) -> ScoreResult:
        normalized = normalize_shape(points, self.config.target_radius)
        profile = resample_radius_profile(normalized, self.config.n_angles)
        return ScoreResult(
            mse=deviation_score(profile, self.config.target_radius),
            profile=profile,
            n_points=int(normalized.shape[0]),
        )

    def try_score(self, points: Iterable) -> Optional[float]:
        return try_calculate_mse(points, self.config.target_radius, self.config.n_angles)
