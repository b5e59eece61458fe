"""Route registration — mounts all routers under ``/api/v1``."""

from fastapi import FastAPI

from giftform_server.routes.forms import router as forms_router
from giftform_server.routes.orders import router as orders_router
from giftform_server.routes.submissions import router as submissions_router

API_PREFIX = "/api/v1"


def register_routes(app: FastAPI) -> None:
    """Include all sub-routers under the versioned API prefix."""
    app.include_router(forms_router, prefix=API_PREFIX)
    app.include_router(orders_router, prefix=API_PREFIX)
    app.include_router(submissions_router, prefix=API_PREFIX)
