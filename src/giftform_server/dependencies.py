"""FastAPI dependency injection — DB sessions, form store, checkout service.

Read endpoints that touch the database get a fresh ``AsyncSession`` via
``get_db()``, committed on success and rolled back on error.  Writes go
through the checkout service's sink, which owns its own transaction.
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from giftform_db.engine import get_session_factory
from giftform_db.repository import SubmissionRepository
from giftform_rules.checkout import CheckoutService
from giftform_rules.forms import FormStore


# ------------------------------------------------------------------
# Database session (transaction boundary)
# ------------------------------------------------------------------

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_repository() -> SubmissionRepository:
    return SubmissionRepository()


# ------------------------------------------------------------------
# Store & service, stashed on app.state during lifespan
# ------------------------------------------------------------------

def get_store(request: Request) -> FormStore:
    """Return the FormStore singleton from ``app.state``."""
    return request.app.state.store


def get_service(request: Request) -> CheckoutService:
    """Return the CheckoutService singleton from ``app.state``."""
    return request.app.state.service
