from __future__ import annotations

import contextlib
import json
import logging
import math
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field, PrivateAttr, field_serializer, field_validator

from core.config import WARMUP_TRIAL_COUNT, ScoringConfig
from core.errors import DuplicateTrial, NotFound
from scoring.scorer import try_calculate_mse

logger = logging.getLogger(__name__)

# Older exports encode dates as seconds since this instant.
REFERENCE_DATE = datetime(2001, 1, 1, tzinfo=timezone.utc)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def iso_utc(value: datetime) -> str:
    return _as_utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")


def raw_points_filename(value: datetime) -> str:
    return f"circle-{_as_utc(value):%Y%m%d-%H%M}.json"


class SamplePoint(BaseModel):
    """One pen-contact observation; ``t`` is seconds since the stroke began."""

    x: float
    y: float
    t: float = Field(..., ge=0.0)

    model_config = {"frozen": True}


class Drawing(BaseModel):
    strokes: Tuple[Tuple[SamplePoint, ...], ...] = ()

    model_config = {"frozen": True}

    @classmethod
    def from_points(cls, points: Sequence[SamplePoint]) -> "Drawing":
        return cls(strokes=(tuple(points),) if points else ())

    def points(self) -> List[SamplePoint]:
        return [point for stroke in self.strokes for point in stroke]


class TrialMetadata(BaseModel):
    trial_id: str
    fatigue_rating: Optional[int] = Field(None, ge=1, le=10)
    mse: Optional[float] = Field(None, ge=0.0)
    raw_points_file: str

    model_config = {"frozen": True}

    @field_validator("mse")
    @classmethod
    def _finite_mse(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and not math.isfinite(value):
            raise ValueError("mse must be finite; store None for unscorable trials")
        return value


class Trial(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    drawing: Drawing
    timestamp: datetime
    metadata: TrialMetadata

    # Only the label changes after capture, through renamed().
    model_config = {"frozen": True}

    @classmethod
    def capture(
        cls,
        drawing: Drawing,
        timestamp: Optional[datetime] = None,
        fatigue_rating: Optional[int] = None,
        config: Optional[ScoringConfig] = None,
    ) -> "Trial":
        """Finalize a drawing attempt and score it.

        Sparse or degenerate drawings still produce a trial, with ``mse`` left
        empty.
        """
        config = config or ScoringConfig()
        timestamp = _as_utc(timestamp or _now())
        mse = try_calculate_mse(drawing.points(), config.target_radius, config.n_angles)
        metadata = TrialMetadata(
            trial_id=iso_utc(timestamp),
            fatigue_rating=fatigue_rating,
            mse=mse,
            raw_points_file=raw_points_filename(timestamp),
        )
        return cls(drawing=drawing, timestamp=timestamp, metadata=metadata)

    def points(self) -> List[SamplePoint]:
        return self.drawing.points()

    @property
    def mse(self) -> Optional[float]:
        return self.metadata.mse

    @property
    def mse_display(self) -> str:
        if self.metadata.mse is None:
            return "N/A"
        return f"{self.metadata.mse:.1f}"

    def renamed(self, label: str) -> "Trial":
        metadata = self.metadata.model_copy(update={"trial_id": label})
        return self.model_copy(update={"metadata": metadata})


class SessionMetadata(BaseModel):
    """Export record for a session; keys are shared with previously captured data."""

    session_id: str
    created: datetime
    fatigue_rating: Optional[int] = Field(None, ge=1, le=10)
    trials: List[TrialMetadata] = Field(default_factory=list)

    @field_validator("created", mode="before")
    @classmethod
    def _parse_created(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return REFERENCE_DATE + timedelta(seconds=float(value))
        return value

    @field_serializer("created", when_used="json")
    def _serialize_created(self, value: datetime) -> str:
        return iso_utc(value)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    @classmethod
    def from_json(cls, text: str) -> "SessionMetadata":
        return cls.model_validate_json(text)


class Session(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), frozen=True)
    trials: List[Trial] = Field(default_factory=list)
    created: datetime = Field(default_factory=_now, frozen=True)
    fatigue_rating: Optional[int] = Field(None, ge=1, le=10, frozen=True)

    _lock: Any = PrivateAttr(default_factory=threading.RLock)

    def _index(self, trial_key: str) -> int:
        for idx, trial in enumerate(self.trials):
            if trial.id == trial_key:
                return idx
        raise NotFound("trial", trial_key)

    @contextlib.contextmanager
    def locked(self) -> Iterator["Session"]:
        """Hold the session lock across several calls."""
        with self._lock:
            yield self

    def get(self, trial_key: str) -> Trial:
        with self._lock:
            return self.trials[self._index(trial_key)]

    def position(self, trial_key: str) -> int:
        with self._lock:
            return self._index(trial_key)

    def snapshot(self) -> List[Trial]:
        with self._lock:
            return list(self.trials)

    def append(self, trial: Trial) -> Trial:
        with self._lock:
            if any(existing.id == trial.id for existing in self.trials):
                raise DuplicateTrial(trial.id)
            self.trials.append(trial)
            logger.debug("session %s: appended trial %s at position %d", self.id, trial.id, len(self.trials) - 1)
            return trial

    def record(
        self,
        drawing: Drawing,
        timestamp: Optional[datetime] = None,
        config: Optional[ScoringConfig] = None,
    ) -> Trial:
        """Capture a trial and append it; warm-up trials carry no fatigue rating."""
        with self._lock:
            rating = self.fatigue_rating if len(self.trials) >= WARMUP_TRIAL_COUNT else None
            trial = Trial.capture(drawing, timestamp=timestamp, fatigue_rating=rating, config=config)
            return self.append(trial)

    def remove(self, trial_key: str) -> Trial:
        with self._lock:
            removed = self.trials.pop(self._index(trial_key))
            logger.debug("session %s: removed trial %s", self.id, trial_key)
            return removed

    def rename(self, trial_key: str, new_label: str) -> Trial:
        if not new_label or not new_label.strip():
            raise ValueError("trial label must not be empty")
        with self._lock:
            idx = self._index(trial_key)
            for other in self.trials:
                if other.id != trial_key and other.metadata.trial_id == new_label:
                    raise DuplicateTrial(new_label, field="trial_id")
            renamed = self.trials[idx].renamed(new_label)
            self.trials[idx] = renamed
            logger.debug("session %s: renamed trial %s to %r", self.id, trial_key, new_label)
            return renamed

    def is_warmup(self, trial_key: str) -> bool:
        with self._lock:
            return self._index(trial_key) < WARMUP_TRIAL_COUNT

    def warmup_trials(self) -> List[Trial]:
        with self._lock:
            return list(self.trials[:WARMUP_TRIAL_COUNT])

    def export_view(self) -> List[Trial]:
        """Trials past the warm-up window, by current order."""
        with self._lock:
            return list(self.trials[WARMUP_TRIAL_COUNT:])

    def export_metadata(self) -> SessionMetadata:
        return SessionMetadata(
            session_id=self.id,
            created=self.created,
            fatigue_rating=self.fatigue_rating,
            trials=[trial.metadata for trial in self.export_view()],
        )
