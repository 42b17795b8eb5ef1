"""Tests for the deadline scheduler."""
from __future__ import annotations

import pytest


class TestCallLater:

    def test_not_run_before_deadline(self, scheduler, clock):
        ran = []
        scheduler.call_later(2.0, lambda: ran.append("a"))
        clock.advance(1.5)
        assert scheduler.run_due() == 0
        assert ran == []
        assert scheduler.pending == 1

    def test_runs_at_deadline(self, scheduler, clock):
        ran = []
        scheduler.call_later(2.0, lambda: ran.append("a"))
        clock.advance(2.0)
        assert scheduler.run_due() == 1
        assert ran == ["a"]
        assert scheduler.pending == 0

    def test_runs_once(self, scheduler, clock):
        ran = []
        scheduler.call_later(0.0, lambda: ran.append("a"))
        scheduler.run_due()
        scheduler.run_due()
        assert ran == ["a"]

    def test_deadline_order(self, scheduler, clock):
        ran = []
        scheduler.call_later(3.0, lambda: ran.append("late"))
        scheduler.call_later(1.0, lambda: ran.append("early"))
        clock.advance(5.0)
        assert scheduler.run_due() == 2
        assert ran == ["early", "late"]

    def test_explicit_now(self, scheduler, clock):
        ran = []
        scheduler.call_later(1.0, lambda: ran.append("a"))
        assert scheduler.run_due(now=clock.now + 1.0) == 1
        assert ran == ["a"]

    def test_negative_delay_rejected(self, scheduler):
        with pytest.raises(ValueError):
            scheduler.call_later(-1.0, lambda: None)


class TestCancel:

    def test_cancelled_call_never_runs(self, scheduler, clock):
        ran = []
        call = scheduler.call_later(1.0, lambda: ran.append("a"))
        call.cancel()
        assert call.cancelled
        assert scheduler.pending == 0
        clock.advance(2.0)
        assert scheduler.run_due() == 0
        assert ran == []

    def test_callback_can_cancel_a_later_call(self, scheduler, clock):
        ran = []
        second = scheduler.call_later(2.0, lambda: ran.append("second"))
        scheduler.call_later(1.0, second.cancel)
        clock.advance(3.0)
        assert scheduler.run_due() == 1
        assert ran == []

    def test_callback_can_schedule(self, scheduler, clock):
        ran = []
        scheduler.call_later(
            1.0, lambda: scheduler.call_later(1.0, lambda: ran.append("b"))
        )
        clock.advance(1.0)
        scheduler.run_due()
        assert scheduler.pending == 1
        clock.advance(1.0)
        scheduler.run_due()
        assert ran == ["b"]
