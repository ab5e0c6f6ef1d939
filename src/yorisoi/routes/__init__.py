"""API routers."""

from yorisoi.routes.health import router as health_router
from yorisoi.routes.jobs import router as jobs_router
from yorisoi.routes.line_webhook import router as line_router
from yorisoi.routes.sessions import router as sessions_router
from yorisoi.routes.upload import router as upload_router

__all__ = [
    "health_router",
    "jobs_router",
    "line_router",
    "sessions_router",
    "upload_router",
]
