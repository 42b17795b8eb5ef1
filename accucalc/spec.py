"""Executable contract for the accumulator calculator.

Defines the executable contract of the engine:
- Constants: digit cap, rounding precision, display thresholds
- Operators and error kinds
- State invariants: predicates over ``CalculatorState`` that must hold
  after every public operation
- Branch map: every decision point in the implementation

The contract is machine-readable.  Conformance tests and the sequence
search in ``accucalc.validation`` iterate over it rather than restating
the rules by hand.

Layers
------
Operator          the four binary operators, keyed by their symbol
ErrorKind         conditions reported to the display instead of raised
StateInvariant    named predicate over a calculator state
BranchSpec        every decision point white-box tests must cover
EngineContract    the full contract for the engine
build_contract()  constructs the EngineContract
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

# ---------------------------------------------------------------------------
# Configuration constants
# ---------------------------------------------------------------------------

DIGITS = "0123456789"
MAX_DIGITS = 12
PRECISION = 9                   # decimal places kept by compute()
EXPONENT_THRESHOLD = 1e12       # |value| at which long operands go exponential
EXPONENT_DIGITS = 6
INITIAL_OPERAND = "0"
ERROR_TEXT = "Error"
ERROR_DISPLAY_SECONDS = 2.0
DEFAULT_GROUPING_SEPARATOR = ","

_NUMERAL = re.compile(r"-?\d+(\.\d*)?")


# ---------------------------------------------------------------------------
# Operators and error kinds
# ---------------------------------------------------------------------------

class Operator(str, Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"


class ErrorKind(str, Enum):
    DIVIDE_BY_ZERO = "divide_by_zero"
    INVALID_RESULT = "invalid_result"


def digit_count(text: str) -> int:
    """Number of decimal digits in ``text``, punctuation ignored."""
    return sum(1 for ch in text if ch in DIGITS)


def is_numeral(text: str) -> bool:
    """True for plain decimal numerals such as ``-12``, ``0.`` or ``3.25``."""
    return _NUMERAL.fullmatch(text) is not None


# ---------------------------------------------------------------------------
# Contract building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StateInvariant:
    """A named predicate that every reachable state satisfies."""

    id: str
    description: str
    check: Callable[[Any], bool]


@dataclass(frozen=True)
class BranchSpec:
    """A decision point in the implementation that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which operation / helper this belongs to


@dataclass(frozen=True)
class EngineContract:
    """Complete contract for the accumulator engine."""

    invariants: list[StateInvariant]
    branches: list[BranchSpec]

    def violations(self, state: Any) -> list[StateInvariant]:
        """Invariants that ``state`` breaks (empty when it is valid)."""
        return [inv for inv in self.invariants if not inv.check(state)]

    def branch_ids(self, operation: str | None = None) -> list[str]:
        return [
            b.id for b in self.branches
            if operation is None or b.operation == operation
        ]


# ---------------------------------------------------------------------------
# Contract builder
# ---------------------------------------------------------------------------

def build_contract() -> EngineContract:
    """Construct the full engine contract."""

    invariants = [
        StateInvariant(
            "STATE-OPERATOR-HAS-OPERAND",
            "A pending operator always has a captured previous operand",
            lambda s: s.pending_operator is None or s.previous_operand is not None,
        ),
        StateInvariant(
            "STATE-OPERAND-NON-EMPTY",
            "The current operand is never empty",
            lambda s: bool(s.current_operand),
        ),
        StateInvariant(
            "STATE-SINGLE-DECIMAL-POINT",
            "The current operand holds at most one decimal point",
            lambda s: s.current_operand.count(".") <= 1,
        ),
        StateInvariant(
            "STATE-OPERAND-IS-NUMERAL",
            "The current operand is a plain decimal numeral",
            lambda s: is_numeral(s.current_operand),
        ),
        StateInvariant(
            "STATE-DIGIT-CAP",
            f"Typed operands hold at most {MAX_DIGITS} digits",
            lambda s: (
                s.awaiting_new_operand
                or digit_count(s.current_operand) <= MAX_DIGITS
            ),
        ),
    ]

    branches = [
        # compute()
        BranchSpec(
            "CMP-UNPARSABLE",
            "An operand does not parse; fall back to current or 0",
            "parse(prev) is None or parse(cur) is None",
            "compute",
        ),
        BranchSpec(
            "CMP-UNKNOWN-OP",
            "Operator is not one of + - * /; current operand returned",
            "op not in Operator",
            "compute",
        ),
        BranchSpec("CMP-ADD", "Addition", "op == '+'", "compute"),
        BranchSpec("CMP-SUB", "Subtraction", "op == '-'", "compute"),
        BranchSpec("CMP-MUL", "Multiplication", "op == '*'", "compute"),
        BranchSpec("CMP-DIV", "Division by a non-zero operand", "op == '/' and cur != 0", "compute"),
        BranchSpec(
            "CMP-DIV-ZERO",
            "Division by zero signals DIVIDE_BY_ZERO and yields 0",
            "op == '/' and cur == 0",
            "compute",
        ),
        BranchSpec(
            "CMP-NON-FINITE",
            "Overflow or NaN signals INVALID_RESULT and yields 0",
            "not isfinite(raw)",
            "compute",
        ),
        BranchSpec(
            "CMP-ROUND",
            f"Result rounded half up to {PRECISION} decimal places",
            "not raw.is_integer()",
            "compute",
        ),
        BranchSpec(
            "CMP-INTEGRAL",
            "Integral result returned unscaled",
            "raw.is_integer()",
            "compute",
        ),
        # format_display()
        BranchSpec(
            "FMT-UNPARSABLE",
            "Text that is not a finite number is shown unchanged",
            "parse(text) is None or not isfinite(parse(text))",
            "format",
        ),
        BranchSpec(
            "FMT-EXPONENT",
            "Long, large operands shown in exponential notation",
            f"digits(text) > {MAX_DIGITS} and abs(value) >= {EXPONENT_THRESHOLD:g}",
            "format",
        ),
        BranchSpec("FMT-DECIMAL", "Decimal operands shown as typed", "'.' in text", "format"),
        BranchSpec("FMT-GROUPED", "Integers shown with thousands grouping", "otherwise", "format"),
        # engine
        BranchSpec(
            "DIG-REPLACE",
            "Digit starts a fresh operand",
            "awaiting_new_operand or current_operand == '0'",
            "input_digit",
        ),
        BranchSpec(
            "DIG-APPEND",
            "Digit appended to the operand",
            f"digits(current_operand) < {MAX_DIGITS}",
            "input_digit",
        ),
        BranchSpec(
            "DIG-CAP",
            "Digit dropped at the cap",
            f"digits(current_operand) >= {MAX_DIGITS}",
            "input_digit",
        ),
        BranchSpec("DEC-FRESH", "Decimal point starts '0.'", "awaiting_new_operand", "input_decimal_point"),
        BranchSpec("DEC-APPEND", "Decimal point appended", "'.' not in current_operand", "input_decimal_point"),
        BranchSpec("DEC-NOOP", "Second decimal point ignored", "'.' in current_operand", "input_decimal_point"),
        BranchSpec("OP-FIRST", "First operator captures the operand", "previous_operand is None", "input_operator"),
        BranchSpec(
            "OP-CHAIN",
            "Operator after a new operand computes the pending operation",
            "pending_operator and not awaiting_new_operand",
            "input_operator",
        ),
        BranchSpec(
            "OP-REPLACE",
            "Operator pressed twice replaces the pending operator",
            "awaiting_new_operand",
            "input_operator",
        ),
        BranchSpec(
            "EQ-NOOP",
            "Equals without a complete operation is ignored",
            "pending_operator is None or previous_operand is None or awaiting_new_operand",
            "calculate",
        ),
        BranchSpec("EQ-COMMIT", "Equals commits the result", "otherwise", "calculate"),
        BranchSpec("DEL-TRIM", "Backspace removes the last character", "len(text) > 1", "delete_last_digit"),
        BranchSpec("DEL-RESET", "Backspace on one character leaves '0'", "len(text) <= 1 or remainder is '-'", "delete_last_digit"),
        BranchSpec(
            "ERR-SIGNAL",
            "Error indicator shown and a reset scheduled",
            "compute signals an ErrorKind",
            "error",
        ),
        BranchSpec(
            "ERR-TIMEOUT",
            "Scheduled reset clears the engine",
            "reset deadline passes",
            "error",
        ),
        BranchSpec(
            "ERR-SETTLE",
            "Input while the error shows dismisses it, then applies",
            "error is not None at operation start",
            "error",
        ),
    ]

    return EngineContract(invariants=invariants, branches=branches)


CONTRACT = build_contract()
