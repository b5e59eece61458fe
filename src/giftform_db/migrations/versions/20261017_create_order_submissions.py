"""Create the order_submissions table.

One row per submitted order: trimmed answers, server-side total, gift
choices and the mapped sheet row, all JSONB except the total.

Revision ID: 20261017_order_submissions
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

# revision identifiers, used by Alembic.
revision = "20261017_order_submissions"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "order_submissions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("form_id", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column(
            "answers", JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")
        ),
        sa.Column("total", sa.Integer(), nullable=False),
        sa.Column(
            "gifts", JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")
        ),
        sa.Column(
            "sheet_row", JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")
        ),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False),
        sa.CheckConstraint("total >= 0", name="ck_total_non_negative"),
    )

    op.create_index("ix_order_submissions_form_id", "order_submissions", ["form_id"])
    op.create_index("ix_order_submissions_status", "order_submissions", ["status"])
    op.create_index("ix_form_created", "order_submissions", ["form_id", "created_at"])
    op.create_index(
        "ix_answers_gin", "order_submissions", ["answers"], postgresql_using="gin"
    )


def downgrade() -> None:
    op.drop_index("ix_answers_gin", table_name="order_submissions")
    op.drop_index("ix_form_created", table_name="order_submissions")
    op.drop_index("ix_order_submissions_status", table_name="order_submissions")
    op.drop_index("ix_order_submissions_form_id", table_name="order_submissions")
    op.drop_table("order_submissions")
