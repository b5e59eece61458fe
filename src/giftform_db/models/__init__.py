"""ORM models for giftform_db."""

from giftform_db.models.base import Base
from giftform_db.models.enums import SubmissionStatus
from giftform_db.models.submission import OrderSubmission

__all__ = ["Base", "SubmissionStatus", "OrderSubmission"]
