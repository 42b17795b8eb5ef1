"""Runtime configuration for the calculator service.

Values come from the environment, with a ``.env`` file in the working
directory loaded first when present.
"""
from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import load_dotenv

from accucalc.spec import DEFAULT_GROUPING_SEPARATOR, DIGITS, ERROR_DISPLAY_SECONDS

ENV_PREFIX = "ACCUCALC_"

_FORBIDDEN_SEPARATORS = set(DIGITS) | {".", "-", "+", "e", "E"}


@dataclass(frozen=True)
class Settings:
    error_display_seconds: float = ERROR_DISPLAY_SECONDS
    grouping_separator: str = DEFAULT_GROUPING_SEPARATOR
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    def __post_init__(self) -> None:
        if not math.isfinite(self.error_display_seconds) or self.error_display_seconds < 0:
            raise ValueError(
                f"error_display_seconds must be a finite number >= 0, "
                f"got {self.error_display_seconds}"
            )
        if len(self.grouping_separator) != 1 or self.grouping_separator in _FORBIDDEN_SEPARATORS:
            raise ValueError(
                f"grouping_separator must be one character that cannot "
                f"appear in a number, got {self.grouping_separator!r}"
            )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level: {self.log_level!r}")
        if not 0 < self.port < 65536:
            raise ValueError(f"port must be in 1..65535, got {self.port}")


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build ``Settings`` from ``environ`` (defaults to ``os.environ``)."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    def _get(name: str, default: str) -> str:
        return environ.get(ENV_PREFIX + name, default)

    try:
        return Settings(
            error_display_seconds=float(
                _get("ERROR_DISPLAY_SECONDS", str(ERROR_DISPLAY_SECONDS))
            ),
            grouping_separator=_get("GROUPING_SEPARATOR", DEFAULT_GROUPING_SEPARATOR),
            log_level=_get("LOG_LEVEL", "INFO").upper(),
            host=_get("HOST", "127.0.0.1"),
            port=int(_get("PORT", "8000")),
        )
    except ValueError as e:
        raise ValueError(f"Invalid {ENV_PREFIX}* configuration: {e}") from e
