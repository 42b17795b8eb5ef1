"""In-memory display that remembers what the engine rendered.

Implements both ``DisplaySink`` and ``HighlightSink``.  The session
service reads it back to build responses; tests read it to check what
a user would have seen.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

from accucalc.spec import Operator

DEFAULT_HISTORY_LIMIT = 100


@dataclass
class RecordingDisplay:
    text: str = ""
    error_style: bool = False
    active_operator: Operator | None = None
    history: deque[str] = field(
        default_factory=lambda: deque(maxlen=DEFAULT_HISTORY_LIMIT)
    )

    def render(self, text: str) -> None:
        self.text = text
        self.history.append(text)

    def set_error_style(self, active: bool) -> None:
        self.error_style = active

    def highlight(self, operator: Operator | None) -> None:
        self.active_operator = operator
