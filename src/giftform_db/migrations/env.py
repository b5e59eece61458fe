"""Alembic environment for the giftform schema.

Migrations connect through the same asyncpg driver the server uses, so
no second (synchronous) PostgreSQL driver is needed.  Alembic's runner is
itself synchronous: the online path opens an async connection and hands
it to ``connection.run_sync``.

Revisions are recorded in ``giftform_alembic_version`` rather than the
default ``alembic_version`` so the schema can share a database with other
Alembic-managed applications.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from giftform_db.config import load_db_settings
from giftform_db.models.base import Base

# Register every table on Base.metadata for autogenerate
import giftform_db.models.submission  # noqa: F401

VERSION_TABLE = "giftform_alembic_version"

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
settings = load_db_settings()


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        version_table=VERSION_TABLE,
        # Column type changes (e.g. Text -> String) show up in autogenerate
        compare_type=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Write the migration SQL to stdout instead of executing it.

    Only the dialect is needed, so no connection (and no password) is used.
    """
    _configure(
        url=settings.safe_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_with_connection(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Connect with asyncpg and apply pending revisions in one transaction."""
    engine = create_async_engine(settings.async_url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_with_connection)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
