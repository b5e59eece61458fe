"""Database configuration — connection and pool settings from the environment.

Connection target, in order of precedence:

1. ``DATABASE_URL`` — any PostgreSQL URL.  The driver part is rewritten to
   ``asyncpg`` whatever the caller wrote (``postgresql://``,
   ``postgresql+psycopg2://``, ...), because both the runtime engine and
   the Alembic runner connect through asyncpg.
2. ``PG_HOST`` / ``PG_PORT`` / ``PG_USER`` / ``PG_PASSWORD`` /
   ``PG_DATABASE`` parts, which suit docker-compose setups.  Passwords may
   contain URL-reserved characters; the URL is built with
   :meth:`sqlalchemy.engine.URL.create`, which quotes them.

Pool and diagnostics knobs:

    PG_POOL_SIZE          persistent connections kept open (default 5)
    PG_MAX_OVERFLOW       extra connections under burst load (default 10)
    PG_POOL_RECYCLE       seconds before a pooled connection is replaced
                          (default 1800; -1 disables)
    GIFTFORM_DB_ECHO      "1"/"true" logs every SQL statement
    GIFTFORM_DB_APP_NAME  ``application_name`` reported to PostgreSQL
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from sqlalchemy.engine import URL, make_url

ASYNC_DRIVER = "postgresql+asyncpg"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class DatabaseSettings:
    """Immutable database settings read once per engine creation."""

    # Connection
    url: URL

    # Pool sizing
    pool_size: int = 5
    max_overflow: int = 10
    pool_recycle: int = 1800

    # Diagnostics
    echo: bool = False
    application_name: str = "giftform"

    @property
    def async_url(self) -> str:
        """Full asyncpg URL, password included, for ``create_async_engine``."""
        return self.url.render_as_string(hide_password=False)

    @property
    def safe_url(self) -> str:
        """URL with the password masked, for log lines."""
        return self.url.render_as_string(hide_password=True)


def _url_from_env() -> URL:
    raw = os.getenv("DATABASE_URL")
    if raw:
        return make_url(raw).set(drivername=ASYNC_DRIVER)
    return URL.create(
        ASYNC_DRIVER,
        username=os.getenv("PG_USER", "giftform"),
        password=os.getenv("PG_PASSWORD", "giftform"),
        host=os.getenv("PG_HOST", "localhost"),
        port=int(os.getenv("PG_PORT", "5432")),
        database=os.getenv("PG_DATABASE", "giftform"),
    )


def load_db_settings() -> DatabaseSettings:
    """Build :class:`DatabaseSettings` from the environment variables above."""
    return DatabaseSettings(
        url=_url_from_env(),
        pool_size=int(os.getenv("PG_POOL_SIZE", "5")),
        max_overflow=int(os.getenv("PG_MAX_OVERFLOW", "10")),
        pool_recycle=int(os.getenv("PG_POOL_RECYCLE", "1800")),
        echo=os.getenv("GIFTFORM_DB_ECHO", "").strip().lower() in _TRUE_VALUES,
        application_name=os.getenv("GIFTFORM_DB_APP_NAME", "giftform"),
    )
