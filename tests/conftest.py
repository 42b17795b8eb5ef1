"""Shared fixtures for calculator tests."""
from __future__ import annotations

import pytest

from accucalc.config import Settings
from accucalc.display import RecordingDisplay
from accucalc.engine import AccumulatorEngine
from accucalc.keymap import dispatch_key
from accucalc.scheduler import DeadlineScheduler
from accucalc.store import SessionStore


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def press(engine: AccumulatorEngine, *keys: str) -> None:
    """Drive the engine with key names ('7', '+', '=', 'C', 'Backspace'...)."""
    for key in keys:
        assert dispatch_key(engine, key), f"unmapped key {key!r}"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler(clock) -> DeadlineScheduler:
    return DeadlineScheduler(clock=clock)


@pytest.fixture
def display() -> RecordingDisplay:
    return RecordingDisplay()


@pytest.fixture
def engine(display, scheduler) -> AccumulatorEngine:
    return AccumulatorEngine(display, highlighter=display, scheduler=scheduler)


@pytest.fixture
def settings() -> Settings:
    return Settings(error_display_seconds=2.0, log_level="DEBUG")


@pytest.fixture
def store(settings, scheduler) -> SessionStore:
    return SessionStore(settings=settings, scheduler=scheduler)
