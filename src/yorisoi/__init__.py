from yorisoi.config import AppConfig, load_config
from yorisoi.exceptions import (
    JobNotFoundError,
    NoChunksFoundError,
    StorageDownloadError,
    StorageError,
    StorageUploadError,
)
from yorisoi.logging import setup_logging

__all__ = [
    "setup_logging",
    "AppConfig",
    "load_config",
    "JobNotFoundError",
    "NoChunksFoundError",
    "StorageDownloadError",
    "StorageError",
    "StorageUploadError",
]
