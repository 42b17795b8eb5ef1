"""Contract conformance tests.

These tests are *driven by* the contract: they replay key sequences
through the engine and check every ``StateInvariant`` defined in
``spec.build_contract`` after every key.  A new invariant added to the
contract is covered here automatically.

The scenarios at the bottom are the worked examples of the calculator's
behaviour, one test each.
"""
from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from accucalc.display import RecordingDisplay
from accucalc.engine import AccumulatorEngine, CalculatorState
from accucalc.keymap import KEYMAP, dispatch_key
from accucalc.scheduler import DeadlineScheduler
from accucalc.spec import CONTRACT, ERROR_TEXT, MAX_DIGITS, ErrorKind, Operator
from accucalc.validation.sequence_search import run_search

from conftest import FakeClock, press

# "tick" lets the error reset fire in the middle of a sequence.
TICK = "<tick>"
key_st = st.sampled_from(sorted(KEYMAP) + [TICK])
keys_st = st.lists(key_st, max_size=40)


def _fresh() -> tuple[AccumulatorEngine, RecordingDisplay, DeadlineScheduler, FakeClock]:
    clock = FakeClock()
    scheduler = DeadlineScheduler(clock=clock)
    display = RecordingDisplay()
    engine = AccumulatorEngine(display, highlighter=display, scheduler=scheduler)
    return engine, display, scheduler, clock


def _replay(engine, scheduler, clock, key) -> None:
    if key == TICK:
        clock.advance(2.0)
        scheduler.run_due()
    else:
        dispatch_key(engine, key)


# ===================================================================
# INVARIANTS (property-based)
# ===================================================================

class TestInvariants:
    """Every invariant in the contract holds after every key."""

    def test_initial_state_is_valid(self):
        engine, *_ = _fresh()
        assert CONTRACT.violations(engine.state) == []

    @given(keys=keys_st)
    @settings(max_examples=300)
    def test_invariants_hold_after_every_key(self, keys):
        engine, _, scheduler, clock = _fresh()
        for i, key in enumerate(keys):
            _replay(engine, scheduler, clock, key)
            broken = CONTRACT.violations(engine.state)
            assert not broken, (
                f"{[inv.id for inv in broken]} after {keys[: i + 1]}: {engine.state}"
            )

    @given(keys=keys_st)
    @settings(max_examples=200)
    def test_display_matches_state(self, keys):
        engine, display, scheduler, clock = _fresh()
        for key in keys:
            _replay(engine, scheduler, clock, key)
        assert display.text == engine.display_text
        assert display.error_style is (engine.error is not None)


class TestBehaviour:

    @given(keys=keys_st)
    @settings(max_examples=200)
    def test_clear_restores_initial_state(self, keys):
        engine, display, scheduler, clock = _fresh()
        for key in keys:
            _replay(engine, scheduler, clock, key)
        engine.clear()
        assert engine.state == CalculatorState()
        assert engine.error is None
        assert display.text == "0"
        assert display.active_operator is None
        assert scheduler.pending == 0

    @given(keys=keys_st)
    @settings(max_examples=200)
    def test_calculate_twice_is_calculate_once(self, keys):
        engine, _, scheduler, clock = _fresh()
        for key in keys:
            _replay(engine, scheduler, clock, key)
        engine.calculate()
        once = engine.state.snapshot()
        engine.calculate()
        assert engine.state == once

    @given(keys=keys_st)
    @settings(max_examples=200)
    def test_decimal_point_twice_is_once(self, keys):
        engine, _, scheduler, clock = _fresh()
        for key in keys:
            _replay(engine, scheduler, clock, key)
        engine.input_decimal_point()
        once = engine.state.snapshot()
        engine.input_decimal_point()
        assert engine.state == once

    def test_sequence_search_finds_nothing(self):
        report = run_search(seed=7, sequences=50, length=25)
        assert report.passed, report.summary()
        assert report.checks_run > 0


# ===================================================================
# SCENARIOS
# ===================================================================

class TestScenarios:

    def test_seven_plus_three(self, engine, display):
        press(engine, "7", "+", "3", "=")
        assert display.text == "10"

    def test_five_divided_by_zero(self, engine, display, scheduler, clock):
        press(engine, "5", "/", "0", "=")
        assert display.text == ERROR_TEXT
        assert engine.error is ErrorKind.DIVIDE_BY_ZERO
        clock.advance(2.0)
        scheduler.run_due()
        assert display.text == "0"
        assert engine.state == CalculatorState()

    def test_thirteenth_digit_dropped(self, engine):
        press(engine, *"1234567890123")
        assert engine.state.current_operand == "123456789012"
        assert len(engine.state.current_operand) == MAX_DIGITS

    def test_backspace(self, engine):
        press(engine, "1", "2", "0", "Backspace")
        assert engine.state.current_operand == "12"
        engine.clear()
        press(engine, "5", "Backspace")
        assert engine.state.current_operand == "0"

    def test_point_one_plus_point_two(self, engine, display):
        press(engine, ".", "1", "+", ".", "2", "=")
        assert display.text == "0.3"

    def test_chained_operations(self, engine, display):
        press(engine, "2", "+", "3", "*", "4", "=")
        # no precedence: (2 + 3) * 4
        assert display.text == "20"

    def test_operator_twice_keeps_operand(self, engine):
        press(engine, "9", "*", "/", "3", "=")
        assert engine.state.current_operand == "3"

    def test_grouped_display(self, engine, display):
        press(engine, *"1234567")
        assert display.text == "1,234,567"
        assert engine.state.current_operand == "1234567"

    def test_negative_result(self, engine, display):
        press(engine, "3", "-", "1", "0", "=")
        assert display.text == "-7"

    def test_highlight_follows_operator(self, engine, display):
        press(engine, "3", "+")
        assert display.active_operator is Operator.ADD
        press(engine, "*")
        assert display.active_operator is Operator.MULTIPLY
        press(engine, "2", "=")
        assert display.active_operator is None
