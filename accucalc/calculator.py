"""Arithmetic and display rules of the accumulator calculator.

These are pure functions: parsing operand text, evaluating one pending
operation, turning a result back into operand text, and formatting an
operand for the screen.  Decision branches are annotated with their
branch-IDs (see spec.py BranchSpec) so white-box tests can trace
coverage back to the contract.

Nothing here raises on bad numeric input.  Division by zero and
non-finite results are reported through the ``on_error`` callback and
evaluate to ``0``.
"""
from __future__ import annotations

import logging
import math
from decimal import Decimal
from typing import Callable

from accucalc.spec import (
    DEFAULT_GROUPING_SEPARATOR,
    EXPONENT_DIGITS,
    EXPONENT_THRESHOLD,
    MAX_DIGITS,
    PRECISION,
    ErrorKind,
    Operator,
    digit_count,
)

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[ErrorKind], None]

_SCALE = 10.0 ** PRECISION


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def strip_grouping(text: str, separator: str = DEFAULT_GROUPING_SEPARATOR) -> str:
    """Remove thousands grouping punctuation from operand text."""
    text = text.replace(DEFAULT_GROUPING_SEPARATOR, "")
    if separator != DEFAULT_GROUPING_SEPARATOR:
        text = text.replace(separator, "")
    return text


def parse_operand(
    value: float | str | None,
    separator: str = DEFAULT_GROUPING_SEPARATOR,
) -> float | None:
    """Parse an operand to a float, or ``None`` if it is not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(strip_grouping(value, separator))
        except ValueError:
            return None
    if math.isnan(number):
        return None
    return number


def coerce_operator(op: Operator | str | None) -> Operator | None:
    """Map a symbol to its ``Operator``; ``None`` for anything else."""
    if isinstance(op, Operator):
        return op
    try:
        return Operator(op)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

def round_result(value: float) -> float:
    """Round half up to ``PRECISION`` decimal places.

    Branches: CMP-ROUND, CMP-INTEGRAL
    """
    if value.is_integer():                                        # CMP-INTEGRAL
        return value
    return math.floor(value * _SCALE + 0.5) / _SCALE              # CMP-ROUND


def compute(
    prev: float | str | None,
    cur: float | str | None,
    op: Operator | str | None,
    on_error: ErrorCallback | None = None,
    separator: str = DEFAULT_GROUPING_SEPARATOR,
) -> float:
    """Evaluate ``prev op cur``.

    Branches: CMP-UNPARSABLE, CMP-UNKNOWN-OP, CMP-ADD, CMP-SUB, CMP-MUL,
              CMP-DIV, CMP-DIV-ZERO, CMP-NON-FINITE, CMP-ROUND, CMP-INTEGRAL
    """
    a = parse_operand(prev, separator)
    b = parse_operand(cur, separator)

    if a is None or b is None:                                    # CMP-UNPARSABLE
        return b if b is not None else 0.0

    operator = coerce_operator(op)
    logger.debug("Compute: %r %s %r", a, getattr(operator, "value", op), b)

    if operator is None:                                          # CMP-UNKNOWN-OP
        return b

    if operator is Operator.ADD:                                  # CMP-ADD
        raw = a + b
    elif operator is Operator.SUBTRACT:                           # CMP-SUB
        raw = a - b
    elif operator is Operator.MULTIPLY:                           # CMP-MUL
        raw = a * b
    else:
        if b == 0:                                                # CMP-DIV-ZERO
            _signal(on_error, ErrorKind.DIVIDE_BY_ZERO)
            return 0.0
        raw = a / b                                               # CMP-DIV

    if not math.isfinite(raw):                                    # CMP-NON-FINITE
        _signal(on_error, ErrorKind.INVALID_RESULT)
        return 0.0

    return round_result(raw)


def _signal(on_error: ErrorCallback | None, kind: ErrorKind) -> None:
    if on_error is None:
        logger.warning("Unhandled calculation error: %s", kind.value)
        return
    on_error(kind)


# ---------------------------------------------------------------------------
# Text forms
# ---------------------------------------------------------------------------

def to_operand_text(value: float) -> str:
    """Canonical operand text for a computed value.

    Integral values drop the fractional part (``10`` rather than
    ``10.0``) and exponent forms are expanded (``0.000000001`` rather
    than ``1e-09``) so the text is always a plain numeral.
    """
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" in text:
        text = format(Decimal(text), "f")
    return text


def format_display(
    text: str,
    separator: str = DEFAULT_GROUPING_SEPARATOR,
) -> str:
    """Render operand text for the screen.

    Branches: FMT-UNPARSABLE, FMT-EXPONENT, FMT-DECIMAL, FMT-GROUPED
    """
    number = parse_operand(text, separator)
    if number is None or not math.isfinite(number):               # FMT-UNPARSABLE
        return text

    if digit_count(text) > MAX_DIGITS and abs(number) >= EXPONENT_THRESHOLD:
        return f"{number:.{EXPONENT_DIGITS}e}"                    # FMT-EXPONENT

    if "." in text:                                               # FMT-DECIMAL
        return text

    grouped = f"{int(number):,}"                                  # FMT-GROUPED
    if separator != ",":
        grouped = grouped.replace(",", separator)
    return grouped
