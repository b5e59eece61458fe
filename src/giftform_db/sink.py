"""DatabaseSink — the PostgreSQL-backed SubmissionSink.

Each ``submit`` call opens its own session, writes one row, and commits.
Any SQLAlchemy or connection-level (OSError) failure is rolled back and re-raised as
:class:`SubmissionError` so the SDK and the API see one error type no
matter which sink is configured.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from giftform_db.engine import get_session_factory
from giftform_db.repository import SubmissionRepository
from giftform_rules.errors import SubmissionError
from giftform_rules.interfaces import SubmissionSink
from giftform_rules.models.order import SubmissionPayload, SubmissionReceipt

logger = logging.getLogger(__name__)


class DatabaseSink(SubmissionSink):
    """Stores submissions in the ``order_submissions`` table.

    Args:
        session_factory: async session factory; defaults to the shared
            process-wide factory, resolved on first submit.
        repository: repository instance (injectable for tests).
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        repository: SubmissionRepository | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._repo = repository or SubmissionRepository()

    def _factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = get_session_factory()
        return self._session_factory

    async def submit(self, payload: SubmissionPayload) -> SubmissionReceipt:
        async with self._factory()() as db:
            try:
                row = await self._repo.create_submission(
                    db,
                    form_id=payload.form_id,
                    answers=payload.answers,
                    total=payload.total,
                    email=payload.email,
                    gifts=payload.gifts,
                    sheet_row=payload.sheet_row,
                    confirmation_html=payload.confirmation_html,
                    admin_notification_html=payload.admin_notification_html,
                )
                await db.commit()
            # asyncpg surfaces refused or dropped connections as OSError
            except (SQLAlchemyError, OSError) as exc:
                await db.rollback()
                logger.exception("Failed to store submission for form %s", payload.form_id)
                raise SubmissionError(f"Failed to store submission: {exc}") from exc

        logger.info(
            "Stored submission %s for form %s (total=%d)",
            row.id, row.form_id, row.total,
        )
        return SubmissionReceipt(
            submission_id=str(row.id),
            form_id=row.form_id,
            total=row.total,
            created_at=row.created_at,
        )
