"""Async CRUD repository for OrderSubmission.

Every method takes an ``AsyncSession`` so the caller decides where the
transaction ends.  Methods flush but never commit.
"""

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from giftform_db.models.submission import OrderSubmission


class SubmissionRepository:
    """Async read/write operations on the ``order_submissions`` table."""

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create_submission(
        self,
        db: AsyncSession,
        *,
        form_id: str,
        answers: dict[str, Any],
        total: int,
        email: str | None = None,
        gifts: dict[str, list[str]] | None = None,
        sheet_row: list[Any] | None = None,
        confirmation_html: str | None = None,
        admin_notification_html: str | None = None,
    ) -> OrderSubmission:
        """Insert a new submission row and return it.

        The caller must ``await db.commit()`` to persist.
        """
        submission = OrderSubmission(
            form_id=form_id,
            email=email,
            answers=answers,
            total=total,
            gifts=gifts or {},
            sheet_row=sheet_row or [],
            confirmation_html=confirmation_html,
            admin_notification_html=admin_notification_html,
        )
        db.add(submission)
        await db.flush()  # Populate id and created_at
        return submission

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get_by_id(
        self, db: AsyncSession, submission_id: uuid.UUID
    ) -> OrderSubmission | None:
        return await db.get(OrderSubmission, submission_id)

    async def list_by_form(
        self,
        db: AsyncSession,
        form_id: str,
        *,
        limit: int = 20,
        offset: int = 0,
    ) -> list[OrderSubmission]:
        """List a form's submissions, most recent first."""
        stmt = (
            select(OrderSubmission)
            .where(OrderSubmission.form_id == form_id)
            .order_by(OrderSubmission.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())
