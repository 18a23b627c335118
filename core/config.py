from __future__ import annotations

import os

from pydantic import BaseModel, Field

DEFAULT_TARGET_RADIUS = 250.0
DEFAULT_N_ANGLES = 360
# Resampling builds an n_angles x n_points matrix.
MAX_N_ANGLES = 3600

# Practice trials at the head of a session; positional, never stored per trial.
WARMUP_TRIAL_COUNT = 5


class ScoringConfig(BaseModel):
    """Parameters shared by every trial that is compared against another.

    ``target_radius`` matches the displayed guide circle; scores are in its
    length-squared units, so it has to stay fixed within an experiment.
    """

    target_radius: float = Field(DEFAULT_TARGET_RADIUS, gt=0.0, allow_inf_nan=False)
    n_angles: int = Field(DEFAULT_N_ANGLES, ge=1, le=MAX_N_ANGLES)
    excellent_below: float = Field(100.0, ge=0.0)
    good_below: float = Field(200.0, ge=0.0)

    model_config = {"frozen": True}

    def with_overrides(self, **overrides) -> "ScoringConfig":
        """Return a validated copy with the given fields replaced.

        Raises pydantic.ValidationError when an override breaks a constraint.
        """
        return ScoringConfig.model_validate({**self.model_dump(), **overrides})


def load_scoring_config() -> ScoringConfig:
    """Build a config from CIRCLE_* environment variables, falling back to defaults."""
    overrides = {}
    target_radius = os.getenv("CIRCLE_TARGET_RADIUS")
    n_angles = os.getenv("CIRCLE_N_ANGLES")
    excellent = os.getenv("CIRCLE_FEEDBACK_EXCELLENT")
    good = os.getenv("CIRCLE_FEEDBACK_GOOD")
    if target_radius:
        overrides["target_radius"] = float(target_radius)
    if n_angles:
        overrides["n_angles"] = int(n_angles)
    if excellent:
        overrides["excellent_below"] = float(excellent)
    if good:
        overrides["good_below"] = float(good)
    return ScoringConfig(**overrides)
