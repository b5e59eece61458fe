"""giftform_db — PostgreSQL persistence layer for order submissions.

This package provides the ORM model, async engine factory, repository, and
the :class:`DatabaseSink` that stores finished orders.  It is consumed by
the FastAPI server through the ``SubmissionSink`` interface.
"""

from giftform_db.models.submission import OrderSubmission
from giftform_db.models.enums import SubmissionStatus
from giftform_db.engine import get_engine, get_session_factory
from giftform_db.repository import SubmissionRepository
from giftform_db.sink import DatabaseSink

__all__ = [
    "OrderSubmission",
    "SubmissionStatus",
    "get_engine",
    "get_session_factory",
    "SubmissionRepository",
    "DatabaseSink",
]
