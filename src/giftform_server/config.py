"""Server configuration — reads settings from environment variables.

All settings have sensible defaults for local development.  In production
the values are typically overridden via env vars or a ``.env`` file.
"""

import os
from dataclasses import dataclass, field

# Read at import time so FastAPI Query() defaults can reference them
DEFAULT_PAGE_LIMIT = int(os.getenv("DEFAULT_PAGE_LIMIT", "20"))
MAX_PAGE_LIMIT = int(os.getenv("MAX_PAGE_LIMIT", "100"))

# Sheet headers contain commas of their own, so the env list uses "|"
SHEET_HEADER_SEPARATOR = "|"


@dataclass(frozen=True)
class ServerSettings:
    """Immutable server configuration read from environment at startup."""

    # Network
    host: str = "0.0.0.0"
    port: int = 8080

    # CORS: comma-separated origins, or "*" for wide-open dev mode
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    # Form documents directory (None → FormStore default, forms/ from repo root)
    forms_dir: str | None = None

    # Response-sheet header row used to build each submission's sheet row.
    # Empty means no sheet row is built.
    sheet_headers: list[str] = field(default_factory=list)

    # Logging
    log_level: str = "INFO"


def load_settings() -> ServerSettings:
    """Build settings from ``SERVER_*`` environment variables."""
    raw_origins = os.getenv("SERVER_CORS_ORIGINS", "*")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]

    raw_headers = os.getenv("SERVER_SHEET_HEADERS", "")
    headers = [h.strip() for h in raw_headers.split(SHEET_HEADER_SEPARATOR)] if raw_headers else []

    return ServerSettings(
        host=os.getenv("SERVER_HOST", "0.0.0.0"),
        port=int(os.getenv("SERVER_PORT", "8080")),
        cors_origins=origins,
        forms_dir=os.getenv("SERVER_FORMS_DIR") or None,
        sheet_headers=headers,
        log_level=os.getenv("SERVER_LOG_LEVEL", "INFO").upper(),
    )
