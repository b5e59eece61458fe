"""Exceptions raised by the order SDK.

Parsing problems (prices, thresholds, field ids) never raise; they degrade
to "no contribution" and are logged.  The only failure the SDK reports to
its caller is a submission-sink error.
"""


class SubmissionError(RuntimeError):
    """A submission sink could not record an order.

    The message is meant to be shown to the respondent unchanged.
    """
