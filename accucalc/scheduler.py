"""Deadline-based one-shot callbacks.

Nothing runs in the background: callbacks fire when whoever owns the
scheduler calls ``run_due()``.  The session store does this before it
serves each request, tests do it after advancing a fake clock.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(eq=False)
class ScheduledCall:
    """Handle for one pending callback."""

    deadline: float
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class DeadlineScheduler:

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._clock = clock
        self._calls: list[ScheduledCall] = []

    def now(self) -> float:
        return self._clock()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        """Schedule ``callback`` to run ``delay`` seconds from now."""
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        call = ScheduledCall(deadline=self._clock() + delay, callback=callback)
        self._calls.append(call)
        return call

    def run_due(self, now: float | None = None) -> int:
        """Run every live callback whose deadline has passed.

        Callbacks run in deadline order.  Returns how many ran.
        """
        if now is None:
            now = self._clock()
        due = sorted(
            (c for c in self._calls if not c.cancelled and c.deadline <= now),
            key=lambda c: c.deadline,
        )
        self._calls = [
            c for c in self._calls if not c.cancelled and c.deadline > now
        ]

        ran = 0
        for call in due:
            if call.cancelled:       # cancelled by an earlier callback
                continue
            call.callback()
            ran += 1
        if ran:
            logger.debug("Ran %d scheduled call(s)", ran)
        return ran

    @property
    def pending(self) -> int:
        return sum(1 for c in self._calls if not c.cancelled)
