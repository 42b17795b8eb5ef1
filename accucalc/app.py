"""Application factory and entry point.

Run with:
    uvicorn accucalc.app:app --reload
or:
    python -m accucalc
"""
from __future__ import annotations

import logging

from fastapi import FastAPI

from accucalc.api import router, set_store
from accucalc.config import Settings, load_settings
from accucalc.store import SessionStore

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def create_app(
    store: SessionStore | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Accepts an optional store and settings for testing; settings are
    read from the environment when omitted.
    """
    if settings is None:
        settings = load_settings()
    configure_logging(settings.log_level)

    if store is None:
        store = SessionStore(settings=settings)

    set_store(store)

    app = FastAPI(
        title="Accumulator Calculator API",
        description=(
            "Four-function calculator sessions. Open a session, press keys "
            "(digits, + - * /, '.', '=', 'C', 'Backspace') and read back "
            "the display. Division by zero and overflow show 'Error' and "
            "the calculator clears itself after a short delay."
        ),
        version="0.1.0",
    )
    app.include_router(router)
    return app


# Default app instance for `uvicorn accucalc.app:app`
app = create_app()
