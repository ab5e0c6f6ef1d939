"""FastAPI application entry point."""

from ddtrace import patch

from yorisoi.app import create_app

patch(fastapi=True, redis=True)

app = create_app()
