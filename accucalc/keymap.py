"""Keyboard and button names mapped onto engine operations.

Digits, ``+ - * /``, ``.`` or ``,`` for the decimal point, ``Enter`` or
``=`` for equals, ``Escape``/``c``/``C`` for clear and ``Backspace``.
Anything else is ignored.
"""
from __future__ import annotations

import logging
from operator import methodcaller
from typing import Callable

from accucalc.engine import AccumulatorEngine
from accucalc.spec import DIGITS, Operator

logger = logging.getLogger(__name__)

Action = Callable[[AccumulatorEngine], None]

_decimal = methodcaller("input_decimal_point")
_equals = methodcaller("calculate")
_clear = methodcaller("clear")

KEYMAP: dict[str, Action] = {
    **{d: methodcaller("input_digit", d) for d in DIGITS},
    **{op.value: methodcaller("input_operator", op) for op in Operator},
    ".": _decimal,
    ",": _decimal,
    "Enter": _equals,
    "=": _equals,
    "Escape": _clear,
    "c": _clear,
    "C": _clear,
    "Backspace": methodcaller("delete_last_digit"),
}


def is_known_key(key: str) -> bool:
    return key in KEYMAP


def dispatch_key(engine: AccumulatorEngine, key: str) -> bool:
    """Apply ``key`` to ``engine``.  Returns False for unmapped keys."""
    action = KEYMAP.get(key)
    if action is None:
        logger.debug("Ignoring unmapped key: %r", key)
        return False
    action(engine)
    return True
