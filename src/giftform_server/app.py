"""Application factory and CLI entry point.

``create_app()`` builds the FastAPI application with:
  - Lifespan handler that loads forms and wires the checkout service once
  - CORS middleware
  - Global exception handlers (ValueError → 400/404, KeyError → 404,
    SubmissionError → 502)
  - All API routes mounted under ``/api/v1``
  - A ``/health`` endpoint for readiness probes

The ``cli()`` function is the ``giftform-server`` console-script entry point.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from giftform_db.engine import dispose_engine, get_engine
from giftform_db.sink import DatabaseSink
from giftform_rules.checkout import CheckoutService
from giftform_rules.errors import SubmissionError
from giftform_rules.forms import FormStore

from giftform_server.config import ServerSettings, load_settings
from giftform_server.errors import (
    generic_error_handler,
    key_error_handler,
    submission_error_handler,
    value_error_handler,
)
from giftform_server.routes import register_routes

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Lifespan
# ------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load forms and build the checkout service; dispose the DB pool on shutdown."""
    settings: ServerSettings = app.state.settings

    store = FormStore(forms_dir=settings.forms_dir)
    store.load()

    service = CheckoutService(
        store,
        DatabaseSink(),
        sheet_headers=settings.sheet_headers,
    )

    app.state.store = store
    app.state.service = service

    yield

    await dispose_engine()
    logger.info("Database engine disposed")


# ------------------------------------------------------------------
# Factory
# ------------------------------------------------------------------

def create_app(settings: ServerSettings | None = None) -> FastAPI:
    """Build and return the configured FastAPI application."""
    if settings is None:
        settings = load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="Gift Order Form API",
        description="Order totals, gift allowances and submissions for order forms",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Exception handlers ---
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(KeyError, key_error_handler)
    app.add_exception_handler(SubmissionError, submission_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # --- Health check (outside /api/v1 prefix) ---
    @app.get("/health")
    async def health() -> dict:
        """Readiness probe — verifies DB connectivity."""
        try:
            async with get_engine().connect() as conn:
                await conn.execute(text("SELECT 1"))
            return {"status": "ok"}
        except Exception as exc:
            logger.error("Health check failed: %s", exc)
            return {"status": "error", "detail": str(exc)}

    register_routes(app)

    return app


# Module-level ASGI export (for uvicorn giftform_server.app:app)
app = create_app()


def cli() -> None:
    """Console-script entry point: ``giftform-server``."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "giftform_server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )
