"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from yorisoi.config import AppConfig, load_config
from yorisoi.dependencies import Services, build_services
from yorisoi.logging import setup_logging
from yorisoi.routes import (
    health_router,
    jobs_router,
    line_router,
    sessions_router,
    upload_router,
)

logger = setup_logging()


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": message})


async def _http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail))


async def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    fields = [".".join(str(part) for part in error["loc"][1:]) for error in exc.errors()]
    logger.info("Rejected invalid request", extra={"path": request.url.path, "fields": fields})
    return _error_response(400, f"invalid request: {', '.join(fields) or 'body'}")


def create_app(services: Services | None = None, config: AppConfig | None = None) -> FastAPI:
    """
    Creates the application.

    Without ``services`` the SDK clients are built from configuration when
    the application starts.
    """
    config = services.config if services is not None else (config or load_config())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.services is None:
            app.state.services = build_services(config)
        yield

    app = FastAPI(title="Yorisoi Visit Notes", lifespan=lifespan)
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.allow_origin],
        allow_credentials=config.allow_origin != "*",
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)

    app.include_router(health_router)
    app.include_router(upload_router)
    app.include_router(sessions_router)
    app.include_router(jobs_router)
    app.include_router(line_router)
    return app
