"""The accumulator engine.

A classic four-function calculator: one operand being typed, one
captured operand, one pending operator.  The engine owns its
``CalculatorState`` and talks to the outside world only through the
sink protocols below, so it runs the same under a test, a terminal or
the HTTP session service.

Decision branches carry their branch-IDs (see spec.py BranchSpec).
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Callable, Protocol

from accucalc.calculator import (
    compute,
    format_display,
    parse_operand,
    strip_grouping,
    to_operand_text,
)
from accucalc.spec import (
    DEFAULT_GROUPING_SEPARATOR,
    DIGITS,
    ERROR_DISPLAY_SECONDS,
    ERROR_TEXT,
    INITIAL_OPERAND,
    MAX_DIGITS,
    ErrorKind,
    Operator,
    digit_count,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Collaborator protocols
# ---------------------------------------------------------------------------

class DisplaySink(Protocol):
    """Where rendered operand text goes."""

    def render(self, text: str) -> None: ...

    def set_error_style(self, active: bool) -> None: ...


class HighlightSink(Protocol):
    """Marks the active operator key, or none."""

    def highlight(self, operator: Operator | None) -> None: ...


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """One-shot delayed callbacks."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

@dataclass
class CalculatorState:
    current_operand: str = INITIAL_OPERAND
    previous_operand: float | None = None
    pending_operator: Operator | None = None
    awaiting_new_operand: bool = False

    def reset(self) -> None:
        self.current_operand = INITIAL_OPERAND
        self.previous_operand = None
        self.pending_operator = None
        self.awaiting_new_operand = False

    def snapshot(self) -> CalculatorState:
        return dataclasses.replace(self)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class AccumulatorEngine:
    """Single-pending-operation calculator driven by discrete inputs.

    ``highlighter`` and ``scheduler`` are optional.  Without a scheduler
    an error stays on screen until the next input or ``clear()``.
    """

    def __init__(
        self,
        display: DisplaySink,
        highlighter: HighlightSink | None = None,
        scheduler: Scheduler | None = None,
        *,
        error_display_seconds: float = ERROR_DISPLAY_SECONDS,
        grouping_separator: str = DEFAULT_GROUPING_SEPARATOR,
    ) -> None:
        self.display = display
        self.highlighter = highlighter
        self.scheduler = scheduler
        self.error_display_seconds = error_display_seconds
        self.grouping_separator = grouping_separator
        self.state = CalculatorState()
        self._error: ErrorKind | None = None
        self._pending_reset: Cancellable | None = None
        self._refresh()

    # -- read-only views ----------------------------------------------------

    @property
    def error(self) -> ErrorKind | None:
        """The error currently on screen, if any."""
        return self._error

    @property
    def display_text(self) -> str:
        if self._error is not None:
            return ERROR_TEXT
        return format_display(self.state.current_operand, self.grouping_separator)

    # -- public operations --------------------------------------------------

    def input_digit(self, digit: str | int) -> None:
        """Type one digit.

        Branches: DIG-REPLACE, DIG-APPEND, DIG-CAP
        """
        d = str(digit)
        if len(d) != 1 or d not in DIGITS:
            raise ValueError(f"Not a digit: {digit!r}")
        logger.debug("Input digit: %s", d)
        self._settle()

        state = self.state
        if state.awaiting_new_operand or state.current_operand == INITIAL_OPERAND:
            state.current_operand = d                             # DIG-REPLACE
            state.awaiting_new_operand = False
        elif digit_count(state.current_operand) < MAX_DIGITS:
            state.current_operand += d                            # DIG-APPEND
        # else: DIG-CAP, digit dropped
        self._refresh()

    def input_decimal_point(self) -> None:
        """Type the decimal point.

        Branches: DEC-FRESH, DEC-APPEND, DEC-NOOP
        """
        logger.debug("Input decimal point")
        self._settle()

        state = self.state
        if state.awaiting_new_operand:                            # DEC-FRESH
            state.current_operand = "0."
            state.awaiting_new_operand = False
        elif "." not in state.current_operand:                    # DEC-APPEND
            state.current_operand += "."
        # else: DEC-NOOP
        self._refresh()

    def input_operator(self, op: Operator | str) -> None:
        """Choose the pending operator, computing any operation it completes.

        Branches: OP-FIRST, OP-CHAIN, OP-REPLACE
        """
        operator = Operator(op)
        logger.debug("Input operator: %s", operator.value)
        self._settle()

        state = self.state
        number = parse_operand(state.current_operand, self.grouping_separator)
        if number is None:
            number = 0.0

        if state.previous_operand is None:                        # OP-FIRST
            state.previous_operand = number
        elif state.pending_operator is not None and not state.awaiting_new_operand:
            result = self._compute()                              # OP-CHAIN
            state.current_operand = to_operand_text(result)
            state.previous_operand = result
            self._refresh()
        # else: OP-REPLACE, previous operand kept

        state.pending_operator = operator
        state.awaiting_new_operand = True
        self._highlight(operator)

    def calculate(self) -> None:
        """The "=" key.

        Branches: EQ-NOOP, EQ-COMMIT
        """
        logger.debug("Calculate")
        self._settle()

        state = self.state
        if (
            state.pending_operator is None
            or state.previous_operand is None
            or state.awaiting_new_operand
        ):
            return                                                # EQ-NOOP

        result = self._compute()                                  # EQ-COMMIT
        state.current_operand = to_operand_text(result)
        state.previous_operand = None
        state.pending_operator = None
        state.awaiting_new_operand = True
        self._refresh()
        self._highlight(None)
        logger.debug("Result: %s", state.current_operand)

    def clear(self) -> None:
        """Reset everything to the initial state."""
        logger.debug("Clear")
        self._cancel_pending_reset()
        if self._error is not None:
            self._error = None
            self.display.set_error_style(False)
        self.state.reset()
        self._refresh()
        self._highlight(None)

    def delete_last_digit(self) -> None:
        """Backspace.

        Branches: DEL-TRIM, DEL-RESET
        """
        logger.debug("Delete last digit")
        self._settle()

        text = strip_grouping(self.state.current_operand, self.grouping_separator)
        if len(text) > 1:
            text = text[:-1]                                      # DEL-TRIM
            if parse_operand(text) is None:
                text = INITIAL_OPERAND                            # DEL-RESET ("-")
        else:
            text = INITIAL_OPERAND                                # DEL-RESET
        self.state.current_operand = text
        self._refresh()

    # -- internals ----------------------------------------------------------

    def _compute(self) -> float:
        state = self.state
        return compute(
            state.previous_operand,
            state.current_operand,
            state.pending_operator,
            on_error=self._signal_error,
            separator=self.grouping_separator,
        )

    def _signal_error(self, kind: ErrorKind) -> None:
        """Branch: ERR-SIGNAL"""
        logger.error("Calculation error: %s", kind.value)
        self._error = kind
        self.display.render(ERROR_TEXT)
        self.display.set_error_style(True)
        if self.scheduler is not None:
            self._pending_reset = self.scheduler.call_later(
                self.error_display_seconds, self._on_error_timeout
            )

    def _on_error_timeout(self) -> None:
        """Branch: ERR-TIMEOUT"""
        self._pending_reset = None
        self.clear()

    def _settle(self) -> None:
        """Dismiss an error still on screen; the state is left as is.

        Branch: ERR-SETTLE
        """
        if self._error is None:
            return
        logger.debug("Input during %s; dismissing the error", self._error.value)
        self._cancel_pending_reset()
        self._error = None
        self.display.set_error_style(False)
        self._refresh()

    def _cancel_pending_reset(self) -> None:
        if self._pending_reset is not None:
            self._pending_reset.cancel()
            self._pending_reset = None

    def _refresh(self) -> None:
        # The error indicator stays up until it is dismissed or cleared.
        if self._error is not None:
            return
        self.display.render(self.display_text)

    def _highlight(self, operator: Operator | None) -> None:
        if self.highlighter is not None:
            self.highlighter.highlight(operator)
