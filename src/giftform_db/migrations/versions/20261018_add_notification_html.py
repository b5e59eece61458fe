"""Store the rendered notification bodies on each submission.

Adds nullable text columns for the respondent confirmation and the shop's
admin notification, both rendered at submit time.

Revision ID: 20261018_notification_html
Revises: 20261017_order_submissions
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261018_notification_html"
down_revision = "20261017_order_submissions"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column(
        "order_submissions", sa.Column("confirmation_html", sa.Text(), nullable=True)
    )
    op.add_column(
        "order_submissions",
        sa.Column("admin_notification_html", sa.Text(), nullable=True),
    )


def downgrade() -> None:
    op.drop_column("order_submissions", "admin_notification_html")
    op.drop_column("order_submissions", "confirmation_html")
