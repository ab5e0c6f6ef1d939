import logging
import os
import sys

from pythonjsonlogger import jsonlogger

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error")

_handler: logging.Handler | None = None


def setup_logging() -> logging.Logger:
    """
    Configures structured JSON logging for the service and returns the root logger.

    The JSON formatter emits timestamp, level, logger name, message and the
    trace_id/span_id fields injected by ddtrace. The stdout handler is
    installed once per process on the root logger and the uvicorn loggers;
    later calls only return the root logger, so every module can call this
    at import time.

    Returns:
        logging.Logger: The configured root logger instance.
    """
    global _handler

    root_logger = logging.getLogger()
    if _handler is not None:
        return root_logger

    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s"
    )
    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(formatter)

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    root_logger.setLevel(level)
    root_logger.handlers = [_handler]

    for logger_name in _UVICORN_LOGGERS:
        u_logger = logging.getLogger(logger_name)
        u_logger.setLevel(level)
        u_logger.handlers = [_handler]
        u_logger.propagate = False

    return root_logger
