"""Request and response models for the calculator session API.

A session is one calculator: an engine plus the display it renders to.
These models only describe what crosses the HTTP boundary.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from accucalc.keymap import is_known_key
from accucalc.spec import ErrorKind, Operator

MAX_KEYS_PER_REQUEST = 64


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


# ---------------------------------------------------------------------------
# State and session views
# ---------------------------------------------------------------------------

class StateSnapshot(BaseModel):
    """The engine's internal state at one instant."""

    current_operand: str
    previous_operand: float | None = None
    pending_operator: Operator | None = None
    awaiting_new_operand: bool = False


class SessionView(BaseModel):
    """What a client needs to draw the calculator."""

    id: str
    display: str = Field(..., description="Text on the calculator screen")
    error: ErrorKind | None = None
    error_style: bool = False
    active_operator: Operator | None = None
    state: StateSnapshot
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

class KeyPress(BaseModel):
    """One or more keys, applied in order."""

    keys: list[str] = Field(..., min_length=1, max_length=MAX_KEYS_PER_REQUEST)

    @field_validator("keys")
    @classmethod
    def keys_are_mapped(cls, keys: list[str]) -> list[str]:
        unknown = [k for k in keys if not is_known_key(k)]
        if unknown:
            raise ValueError(f"Unknown key(s): {unknown!r}")
        return keys
