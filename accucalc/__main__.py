"""Serve the calculator API: ``python -m accucalc``."""
from __future__ import annotations

import uvicorn

from accucalc.config import load_settings


def main() -> None:
    settings = load_settings()
    uvicorn.run(
        "accucalc.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
