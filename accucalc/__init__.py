"""Four-function accumulator calculator with an HTTP session service."""
from __future__ import annotations

from accucalc.calculator import compute, format_display
from accucalc.display import RecordingDisplay
from accucalc.engine import AccumulatorEngine, CalculatorState
from accucalc.spec import ErrorKind, Operator

__all__ = [
    "AccumulatorEngine",
    "CalculatorState",
    "ErrorKind",
    "Operator",
    "RecordingDisplay",
    "compute",
    "format_display",
]

__version__ = "0.1.0"
