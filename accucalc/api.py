"""FastAPI REST endpoints for calculator sessions.

Routes
------
POST   /sessions              Open a new calculator
GET    /sessions/{id}         Current display and state
POST   /sessions/{id}/keys    Press one or more keys
POST   /sessions/{id}/clear   Clear the calculator
DELETE /sessions/{id}         Close a calculator
"""
from __future__ import annotations

from fastapi import APIRouter, HTTPException

from accucalc.models import KeyPress, SessionView
from accucalc.store import SessionNotFoundError, SessionStore

router = APIRouter(prefix="/sessions", tags=["sessions"])

# The store instance is injected by the app factory (see app.py).
_store: SessionStore | None = None


def set_store(store: SessionStore) -> None:
    """Inject the store instance. Called once at app startup."""
    global _store
    _store = store


def get_store() -> SessionStore:
    assert _store is not None, "Store not initialized"
    return _store


def _not_found(session_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Session not found: {session_id}")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("", response_model=SessionView, status_code=201)
def create_session() -> SessionView:
    """Open a new calculator showing 0."""
    return get_store().create().view()


@router.get("/{session_id}", response_model=SessionView)
def get_session(session_id: str) -> SessionView:
    """Current display and state of a calculator."""
    try:
        return get_store().get(session_id).view()
    except SessionNotFoundError:
        raise _not_found(session_id)


@router.post("/{session_id}/keys", response_model=SessionView)
def press_keys(session_id: str, payload: KeyPress) -> SessionView:
    """Press keys in order and return the resulting display."""
    try:
        return get_store().press(session_id, payload.keys).view()
    except SessionNotFoundError:
        raise _not_found(session_id)


@router.post("/{session_id}/clear", response_model=SessionView)
def clear_session(session_id: str) -> SessionView:
    """Clear the calculator."""
    try:
        return get_store().reset(session_id).view()
    except SessionNotFoundError:
        raise _not_found(session_id)


@router.delete("/{session_id}", response_model=SessionView)
def delete_session(session_id: str) -> SessionView:
    """Close a calculator and return its final view."""
    try:
        return get_store().delete(session_id).view()
    except SessionNotFoundError:
        raise _not_found(session_id)
