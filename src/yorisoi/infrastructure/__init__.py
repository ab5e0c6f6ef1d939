"""Infrastructure layer exports."""

from yorisoi.infrastructure.assemblyai_transcriber import AssemblyAITranscriber
from yorisoi.infrastructure.gemini_llm import GeminiLLMService
from yorisoi.infrastructure.line_messaging import LineMessagingService
from yorisoi.infrastructure.minio_storage import MinioObjectStorage
from yorisoi.infrastructure.redis_marker_store import RedisMarkerStore

__all__ = [
    "AssemblyAITranscriber",
    "GeminiLLMService",
    "LineMessagingService",
    "MinioObjectStorage",
    "RedisMarkerStore",
]
