"""giftform_server — FastAPI REST API for the gift order form SDK.

Serves loaded forms, quotes live totals and gift allowances, and records
submissions through the configured SubmissionSink.
"""
