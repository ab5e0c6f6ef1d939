"""Domain layer exports."""

from yorisoi.domain.models import (
    ConsolidatedSummary,
    JobMetadata,
    JobOutcome,
    JobStatus,
    PartialSummary,
    PollResult,
    SummaryMode,
)
from yorisoi.domain.recognition import (
    DirectResult,
    RecognitionPayload,
    WrappedOperation,
    resolve_recognition_payload,
)
from yorisoi.domain.audio_normalizer import AudioNormalizer, NormalizeOptions
from yorisoi.domain.chunk_summarizer import ChunkSummarizer
from yorisoi.domain.delivery_gate import DeliveryGate
from yorisoi.domain.job_manager import TranscriptionJobManager
from yorisoi.domain.mode_classifier import classify_mode
from yorisoi.domain.object_combiner import ObjectCombiner
from yorisoi.domain.reducer import SummaryReducer
from yorisoi.domain.transcript_chunker import split_transcript

__all__ = [
    "AudioNormalizer",
    "ChunkSummarizer",
    "ConsolidatedSummary",
    "DeliveryGate",
    "DirectResult",
    "JobMetadata",
    "JobOutcome",
    "JobStatus",
    "NormalizeOptions",
    "ObjectCombiner",
    "PartialSummary",
    "PollResult",
    "RecognitionPayload",
    "SummaryMode",
    "SummaryReducer",
    "TranscriptionJobManager",
    "WrappedOperation",
    "classify_mode",
    "resolve_recognition_payload",
    "split_transcript",
]
