"""Submission endpoints — read back stored orders for a form."""

import uuid
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from giftform_db.models.submission import OrderSubmission
from giftform_db.repository import SubmissionRepository
from giftform_rules.forms import FormStore

from giftform_server.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from giftform_server.dependencies import get_db, get_repository, get_store

router = APIRouter(prefix="/forms", tags=["submissions"])


class SubmissionInfo(BaseModel):
    submission_id: str
    form_id: str
    email: str | None
    total: int
    answers: dict[str, Any]
    gifts: dict[str, list[str]]
    sheet_row: list[Any]
    status: str
    created_at: datetime
    confirmation_html: str | None = None
    admin_notification_html: str | None = None

    @classmethod
    def from_row(cls, row: OrderSubmission) -> "SubmissionInfo":
        return cls(
            submission_id=str(row.id),
            form_id=row.form_id,
            email=row.email,
            total=row.total,
            answers=row.answers,
            gifts=row.gifts,
            sheet_row=row.sheet_row,
            status=str(getattr(row.status, "value", row.status)),
            created_at=row.created_at,
            confirmation_html=row.confirmation_html,
            admin_notification_html=row.admin_notification_html,
        )


@router.get("/{form_id}/submissions")
async def list_submissions(
    form_id: str,
    store: FormStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
    repo: SubmissionRepository = Depends(get_repository),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
) -> list[SubmissionInfo]:
    """List a form's submissions, most recent first."""
    form = store.get_form(form_id)
    rows = await repo.list_by_form(db, form.form_id, limit=limit, offset=offset)
    return [SubmissionInfo.from_row(row) for row in rows]


@router.get("/{form_id}/submissions/{submission_id}")
async def get_submission(
    form_id: str,
    submission_id: uuid.UUID,
    store: FormStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
    repo: SubmissionRepository = Depends(get_repository),
) -> SubmissionInfo:
    """Fetch one stored submission.

    Raises 404 if it does not exist or belongs to another form.
    """
    form = store.get_form(form_id)
    row = await repo.get_by_id(db, submission_id)
    if row is None or row.form_id != form.form_id:
        raise ValueError(f"Submission not found: {submission_id}")
    return SubmissionInfo.from_row(row)
