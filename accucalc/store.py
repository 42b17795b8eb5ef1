"""In-memory calculator session store.

Each session owns an ``AccumulatorEngine`` and the ``RecordingDisplay``
it renders to.  All sessions share one ``DeadlineScheduler``; due error
resets are run before any session is handed out, so a client that
comes back after the error timeout sees the cleared calculator.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from accucalc.config import Settings
from accucalc.display import RecordingDisplay
from accucalc.engine import AccumulatorEngine
from accucalc.keymap import dispatch_key
from accucalc.models import SessionView, StateSnapshot, _new_id, _utcnow
from accucalc.scheduler import DeadlineScheduler

logger = logging.getLogger(__name__)


class SessionNotFoundError(Exception):
    """Raised when a session lookup fails."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


@dataclass
class Session:
    id: str
    engine: AccumulatorEngine
    display: RecordingDisplay
    created_at: datetime
    updated_at: datetime

    def view(self) -> SessionView:
        state = self.engine.state
        return SessionView(
            id=self.id,
            display=self.display.text,
            error=self.engine.error,
            error_style=self.display.error_style,
            active_operator=self.display.active_operator,
            state=StateSnapshot(
                current_operand=state.current_operand,
                previous_operand=state.previous_operand,
                pending_operator=state.pending_operator,
                awaiting_new_operand=state.awaiting_new_operand,
            ),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class SessionStore:
    """In-memory store of calculator sessions."""

    def __init__(
        self,
        settings: Settings | None = None,
        scheduler: DeadlineScheduler | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.scheduler = scheduler or DeadlineScheduler()
        self._sessions: dict[str, Session] = {}

    def create(self) -> Session:
        """Open a new calculator showing ``0``."""
        display = RecordingDisplay()
        engine = AccumulatorEngine(
            display,
            highlighter=display,
            scheduler=self.scheduler,
            error_display_seconds=self.settings.error_display_seconds,
            grouping_separator=self.settings.grouping_separator,
        )
        now = _utcnow()
        session = Session(
            id=_new_id(),
            engine=engine,
            display=display,
            created_at=now,
            updated_at=now,
        )
        self._sessions[session.id] = session
        logger.info("Created session %s", session.id)
        return session

    def get(self, session_id: str) -> Session:
        """Retrieve a session, after running any due error resets."""
        self.scheduler.run_due()
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def press(self, session_id: str, keys: list[str]) -> Session:
        """Apply keys in order; unmapped keys are skipped."""
        session = self.get(session_id)
        for key in keys:
            dispatch_key(session.engine, key)
        session.updated_at = _utcnow()
        return session

    def reset(self, session_id: str) -> Session:
        """Clear one session's calculator."""
        session = self.get(session_id)
        session.engine.clear()
        session.updated_at = _utcnow()
        return session

    def delete(self, session_id: str) -> Session:
        """Delete a session and return it."""
        session = self.get(session_id)
        del self._sessions[session_id]
        logger.info("Deleted session %s", session_id)
        return session

    def count(self) -> int:
        return len(self._sessions)

    def clear(self) -> None:
        """Remove all sessions (useful for testing)."""
        self._sessions.clear()
