from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from core.config import ScoringConfig
from core.errors import DuplicateTrial, NotFound, ScoringError
from core.models import Drawing, SessionMetadata
from schemas.sessions import (
    ScoreRequest,
    ScoreResponse,
    SessionCreate,
    SessionSummary,
    TrialCreate,
    TrialRename,
    TrialSummary,
)
from scoring.feedback import grade_feedback
from scoring.scorer import ShapeScorer
from sessions.store import InMemorySessionStore


def build_sessions_router(store: InMemorySessionStore, config: ScoringConfig) -> APIRouter:
    router = APIRouter(prefix="/v1", tags=["scoring", "sessions"])

    def _session(session_id: str):
        try:
            return store.get(session_id)
        except NotFound as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

    @router.post("/score", response_model=ScoreResponse)
    def score_points(body: ScoreRequest) -> ScoreResponse:
        overrides: Dict[str, Any] = {}
        if body.target_radius is not None:
            overrides["target_radius"] = body.target_radius
        if body.n_angles is not None:
            overrides["n_angles"] = body.n_angles
        try:
            request_config = config.with_overrides(**overrides) if overrides else config
        except ValidationError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        try:
            result = ShapeScorer(request_config).score_profile(body.points)
        except ScoringError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        feedback = grade_feedback(result.mse, request_config)
        return ScoreResponse(
            mse=result.mse,
            n_points=result.n_points,
            target_radius=request_config.target_radius,
            n_angles=request_config.n_angles,
            feedback=feedback,
            message=feedback.message,
            profile=[float(r) for r in result.profile] if body.include_profile else None,
        )

    @router.get("/sessions", response_model=List[SessionSummary])
    def list_sessions() -> List[SessionSummary]:
        return [SessionSummary.from_session(s, config, include_trials=False) for s in store.list()]

    @router.post("/sessions", response_model=SessionSummary)
    def create_session(body: SessionCreate) -> SessionSummary:
        session = store.create(fatigue_rating=body.fatigue_rating)
        return SessionSummary.from_session(session, config)

    @router.get("/sessions/{session_id}", response_model=SessionSummary)
    def get_session(session_id: str) -> SessionSummary:
        return SessionSummary.from_session(_session(session_id), config)

    @router.delete("/sessions/{session_id}")
    def delete_session(session_id: str) -> Dict[str, Any]:
        try:
            store.delete(session_id)
        except NotFound as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {"status": "ok"}

    @router.post("/sessions/{session_id}/trials", response_model=TrialSummary)
    def record_trial(session_id: str, body: TrialCreate) -> TrialSummary:
        session = _session(session_id)
        with session.locked():
            trial = session.record(Drawing(strokes=body.strokes), timestamp=body.timestamp, config=config)
            position = session.position(trial.id)
        return TrialSummary.from_trial(trial, position, config)

    @router.patch("/sessions/{session_id}/trials/{trial_key}", response_model=TrialSummary)
    def rename_trial(session_id: str, trial_key: str, body: TrialRename) -> TrialSummary:
        session = _session(session_id)
        try:
            with session.locked():
                trial = session.rename(trial_key, body.trial_id)
                position = session.position(trial.id)
        except NotFound as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except DuplicateTrial as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return TrialSummary.from_trial(trial, position, config)

    @router.delete("/sessions/{session_id}/trials/{trial_key}")
    def remove_trial(session_id: str, trial_key: str) -> Dict[str, Any]:
        session = _session(session_id)
        try:
            with session.locked():
                session.remove(trial_key)
                trial_count = len(session.trials)
        except NotFound as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {"status": "ok", "trial_count": trial_count}

    @router.get(
        "/sessions/{session_id}/export",
        response_model=SessionMetadata,
        response_model_exclude_none=True,
    )
    def export_session(session_id: str) -> SessionMetadata:
        return _session(session_id).export_metadata()

    return router
