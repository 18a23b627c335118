from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from core.config import MAX_N_ANGLES, WARMUP_TRIAL_COUNT, ScoringConfig
from core.models import SamplePoint, Session, Trial
from scoring.feedback import Feedback, grade_feedback


class ScoreRequest(BaseModel):
    points: List[SamplePoint]
    target_radius: Optional[float] = Field(None, gt=0.0, allow_inf_nan=False)
    n_angles: Optional[int] = Field(None, ge=1, le=MAX_N_ANGLES)
    include_profile: bool = False


class ScoreResponse(BaseModel):
    mse: float
    n_points: int
    target_radius: float
    n_angles: int
    feedback: Feedback
    message: str
    profile: Optional[List[float]] = None


class SessionCreate(BaseModel):
    fatigue_rating: Optional[int] = Field(None, ge=1, le=10)


class TrialCreate(BaseModel):
    strokes: List[List[SamplePoint]]
    timestamp: Optional[datetime] = None


class TrialRename(BaseModel):
    trial_id: str = Field(..., min_length=1)


class TrialSummary(BaseModel):
    id: str
    position: int
    trial_id: str
    timestamp: datetime
    fatigue_rating: Optional[int] = None
    mse: Optional[float] = None
    mse_display: str
    feedback: Optional[Feedback] = None
    raw_points_file: str
    warmup: bool
    n_points: int

    @classmethod
    def from_trial(cls, trial: Trial, position: int, config: ScoringConfig) -> "TrialSummary":
        return cls(
            id=trial.id,
            position=position,
            trial_id=trial.metadata.trial_id,
            timestamp=trial.timestamp,
            fatigue_rating=trial.metadata.fatigue_rating,
            mse=trial.metadata.mse,
            mse_display=trial.mse_display,
            feedback=grade_feedback(trial.metadata.mse, config),
            raw_points_file=trial.metadata.raw_points_file,
            warmup=position < WARMUP_TRIAL_COUNT,
            n_points=len(trial.points()),
        )


class SessionSummary(BaseModel):
    session_id: str
    created: datetime
    fatigue_rating: Optional[int] = None
    trial_count: int
    export_count: int
    trials: List[TrialSummary] = Field(default_factory=list)

    @classmethod
    def from_session(cls, session: Session, config: ScoringConfig, include_trials: bool = True) -> "SessionSummary":
        trials = session.snapshot()
        return cls(
            session_id=session.id,
            created=session.created,
            fatigue_rating=session.fatigue_rating,
            trial_count=len(trials),
            export_count=max(0, len(trials) - WARMUP_TRIAL_COUNT),
            trials=[TrialSummary.from_trial(t, i, config) for i, t in enumerate(trials)] if include_trials else [],
        )
