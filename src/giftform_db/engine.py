"""Async SQLAlchemy engine and session factory.

One engine (and so one connection pool) per process, created on the first
``get_engine()`` call from :func:`~giftform_db.config.load_db_settings`.
The server's lifespan calls ``dispose_engine()`` on shutdown; the next
``get_engine()`` after that builds a fresh engine from the current
environment.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from giftform_db.config import DatabaseSettings, load_db_settings

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def engine_options(settings: DatabaseSettings) -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine`` derived from *settings*.

    ``pool_pre_ping`` makes a connection dropped by PostgreSQL (restart,
    idle timeout) surface as a reconnect rather than a failed submit.
    The application name is passed through asyncpg's ``server_settings``
    so it shows up in ``pg_stat_activity``.
    """
    return {
        "echo": settings.echo,
        "pool_size": settings.pool_size,
        "max_overflow": settings.max_overflow,
        "pool_recycle": settings.pool_recycle,
        "pool_pre_ping": True,
        "connect_args": {
            "server_settings": {"application_name": settings.application_name},
        },
    }


def get_engine(settings: DatabaseSettings | None = None) -> AsyncEngine:
    """Return the shared async engine, creating it on first use.

    Args:
        settings: only consulted when the engine does not exist yet;
            defaults to :func:`load_db_settings`.
    """
    global _engine
    if _engine is None:
        settings = settings or load_db_settings()
        _engine = create_async_engine(settings.async_url, **engine_options(settings))
        logger.info(
            "Created database engine for %s (pool_size=%d, max_overflow=%d)",
            settings.safe_url, settings.pool_size, settings.max_overflow,
        )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the shared session factory bound to :func:`get_engine`.

    Sessions keep attribute values after commit (``expire_on_commit=False``)
    so a stored row can still be read once its transaction has ended.
    """
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factory


async def dispose_engine() -> None:
    """Close every pooled connection and forget the engine and factory."""
    global _engine, _session_factory
    if _engine is None:
        return
    await _engine.dispose()
    logger.info("Database engine disposed")
    _engine = None
    _session_factory = None
