"""Database-level enumerations for order submissions."""

import enum


class SubmissionStatus(str, enum.Enum):
    """Lifecycle state of a stored order.

    Every row is written as ``received``; the shop follows up with the
    respondent outside this service.
    """

    RECEIVED = "received"
