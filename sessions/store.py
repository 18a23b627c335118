from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Dict, List, Optional

from core.errors import NotFound
from core.models import Session

logger = logging.getLogger(__name__)


class InMemorySessionStore:
    """Process-local registry of sessions keyed by session id."""

    def __init__(self):
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def create(self, fatigue_rating: Optional[int] = None, created: Optional[datetime] = None) -> Session:
        kwargs = {"fatigue_rating": fatigue_rating}
        if created is not None:
            kwargs["created"] = created
        session = Session(**kwargs)
        return self.add(session)

    def add(self, session: Session) -> Session:
        with self._lock:
            self._sessions[session.id] = session
        logger.debug("stored session %s", session.id)
        return session

    def get(self, session_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise NotFound("session", session_id)
        return session

    def list(self) -> List[Session]:
        with self._lock:
            sessions = list(self._sessions.values())
        return sorted(sessions, key=lambda s: s.created)

    def delete(self, session_id: str) -> Session:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise NotFound("session", session_id)
        logger.debug("deleted session %s", session_id)
        return session
