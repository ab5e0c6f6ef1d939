"""Handler exports."""

from yorisoi.handlers.finalize_handler import FinalizeHandler
from yorisoi.handlers.job_poll_handler import JobPollHandler

__all__ = ["FinalizeHandler", "JobPollHandler"]
