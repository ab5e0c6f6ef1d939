"""Infrastructure interface exports."""

from yorisoi.infrastructure.interfaces.job_repository import JobRepository
from yorisoi.infrastructure.interfaces.llm_service import LLMService
from yorisoi.infrastructure.interfaces.marker_store import MarkerStore
from yorisoi.infrastructure.interfaces.messaging_service import MessagingService
from yorisoi.infrastructure.interfaces.storage import ObjectStorage
from yorisoi.infrastructure.interfaces.transcription_service import TranscriptionService

__all__ = [
    "JobRepository",
    "LLMService",
    "MarkerStore",
    "MessagingService",
    "ObjectStorage",
    "TranscriptionService",
]
