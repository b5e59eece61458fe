"""Global exception handlers — map SDK exceptions to HTTP status codes.

The SDK raises ``ValueError`` for malformed input and ``KeyError`` for
unknown forms or gift sections.  Installing handlers once keeps route
handlers focused on the happy path.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from giftform_rules.errors import SubmissionError

logger = logging.getLogger(__name__)

# Checked in order; first match wins.
_VALUE_ERROR_PATTERNS: list[tuple[str, int]] = [
    ("not found", 404),
    ("invalid form url", 400),
]

_SAFE_MESSAGES: dict[int, str] = {
    404: "Resource not found",
    400: "Invalid request",
}


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Map ``ValueError`` to 404 or 400 by message keyword.

    The raw message is logged server-side only.
    """
    msg = str(exc)
    status = 400
    for pattern, code in _VALUE_ERROR_PATTERNS:
        if pattern in msg.lower():
            status = code
            break

    logger.warning("ValueError [%d] at %s: %s", status, request.url, msg)
    return JSONResponse(
        status_code=status,
        content={"detail": _SAFE_MESSAGES.get(status, "Invalid request")},
    )


async def key_error_handler(request: Request, exc: KeyError) -> JSONResponse:
    """Unknown form id or gift section → 404."""
    logger.warning("KeyError at %s: %s", request.url, exc)
    return JSONResponse(status_code=404, content={"detail": "Resource not found"})


async def submission_error_handler(request: Request, exc: SubmissionError) -> JSONResponse:
    """Sink failure → 502.  The sink's message is surfaced to the client."""
    logger.error("SubmissionError at %s: %s", request.url, exc)
    return JSONResponse(
        status_code=502,
        content={"success": False, "detail": str(exc)},
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all — log full traceback, return 500."""
    logger.exception("Unhandled exception at %s", request.url)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )
