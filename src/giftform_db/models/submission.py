"""OrderSubmission ORM model — one row per submitted order.

The answer set, gift choices and sheet row are stored as JSONB, and the
rendered confirmation and admin notification bodies as text, so a single
row is enough to rebuild the order review without touching other tables.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from giftform_db.models.base import Base
from giftform_db.models.enums import SubmissionStatus


class OrderSubmission(Base):
    __tablename__ = "order_submissions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # --- Identity ---
    form_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    # Respondent email, when supplied outside the form body
    email: Mapped[str | None] = mapped_column(Text, nullable=True)

    # --- Order content ---
    # Trimmed answer set keyed by field id: {"question_<id>": value, ...}
    answers: Mapped[dict] = mapped_column(
        JSONB,
        nullable=False,
        server_default=text("'{}'::jsonb"),
    )
    # Server-recomputed total; the client total is never stored
    total: Mapped[int] = mapped_column(Integer, nullable=False)
    # {question_id: ["gift name", ...]} per gift section
    gifts: Mapped[dict] = mapped_column(
        JSONB,
        nullable=False,
        server_default=text("'{}'::jsonb"),
    )
    # Cells aligned to the response-sheet header row; empty when unmapped
    sheet_row: Mapped[list] = mapped_column(
        JSONB,
        nullable=False,
        server_default=text("'[]'::jsonb"),
    )

    # --- Rendered notifications ---
    # HTML bodies built at submit time, kept for delivery and audit
    confirmation_html: Mapped[str | None] = mapped_column(Text, nullable=True)
    admin_notification_html: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[SubmissionStatus] = mapped_column(
        String(20),
        nullable=False,
        default=SubmissionStatus.RECEIVED,
        index=True,
    )

    # --- Timestamps ---
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("total >= 0", name="ck_total_non_negative"),
        # Listing a form's orders newest-first is the hot path
        Index("ix_form_created", "form_id", "created_at"),
        Index("ix_answers_gin", "answers", postgresql_using="gin"),
    )

    def __repr__(self) -> str:
        return (
            f"<OrderSubmission(id={self.id!s}, form={self.form_id!r}, "
            f"total={self.total}, status={self.status!r})>"
        )
