"""Handler that completes a transcription job: summary, artifacts, delivery."""

import io

from yorisoi.config import PipelineConfig
from yorisoi.domain.chunk_summarizer import ChunkSummarizer
from yorisoi.domain.delivery_formatter import (
    SHORT_TRANSCRIPT_PLACEHOLDER,
    format_detail,
    format_document,
    format_short,
)
from yorisoi.domain.delivery_gate import DeliveryGate
from yorisoi.domain.job_manager import TranscriptionJobManager
from yorisoi.domain.mode_classifier import classify_mode
from yorisoi.domain.models import (
    ConsolidatedSummary,
    JobMetadata,
    JobOutcome,
    JobStatus,
    TranscriptArtifact,
    summary_object_name,
    transcript_object_name,
)
from yorisoi.domain.reducer import SummaryReducer
from yorisoi.domain.transcript_chunker import split_transcript
from yorisoi.exceptions import MessagingError
from yorisoi.infrastructure.interfaces.messaging_service import MessagingService
from yorisoi.infrastructure.interfaces.storage import ObjectStorage
from yorisoi.logging import setup_logging

logger = setup_logging()


def significant_length(text: str) -> int:
    return len("".join(text.split()))


class JobPollHandler:
    """Reports job progress and, once recognition is done, delivers the note."""

    def __init__(
        self,
        storage: ObjectStorage,
        job_manager: TranscriptionJobManager,
        summarizer: ChunkSummarizer,
        reducer: SummaryReducer,
        gate: DeliveryGate,
        messenger: MessagingService,
        pipeline: PipelineConfig,
    ):
        self._storage = storage
        self._job_manager = job_manager
        self._summarizer = summarizer
        self._reducer = reducer
        self._gate = gate
        self._messenger = messenger
        self._pipeline = pipeline

    def process(self, job_id: str) -> JobOutcome:
        """
        Polls a job and finishes it when recognition is done.

        Repeated polls of a finished job reuse the stored summary and never
        notify the recipient twice.

        Args:
            job_id: The transcription job id returned by finalize.

        Returns:
            JobOutcome with the status and, when done, transcript and summary.

        Raises:
            JobNotFoundError: If the job is unknown.
            RecognitionFailedError: If recognition failed.
            ResultExtractionError: If no transcript could be extracted.
            StorageUploadError: If an artifact cannot be stored.
            MarkerStoreError: If the delivery claim fails.
        """
        metadata = self._job_manager.metadata(job_id)
        poll = self._job_manager.poll(job_id)
        if poll.status == JobStatus.RUNNING:
            return JobOutcome(status=JobStatus.RUNNING)

        transcript = poll.transcript or ""
        self._store_transcript(metadata, transcript)

        if significant_length(transcript) < self._pipeline.min_transcript_chars:
            logger.info(
                "Transcript too short, skipping summary",
                extra={"job_id": job_id, "chars": significant_length(transcript)},
            )
            return JobOutcome(
                status=JobStatus.DONE,
                transcript=transcript,
                summary=SHORT_TRANSCRIPT_PLACEHOLDER,
            )

        summary = self._load_summary(metadata.session_id)
        if summary is None:
            summary = self._summarize(transcript)
            self._store_summary(metadata.session_id, summary, transcript)

        claimed = self._gate.try_claim(job_id).acquired
        if claimed:
            # a concurrent poll may have stored its own summary; deliver that one
            summary = self._load_summary(metadata.session_id) or summary
        short = format_short(summary, summary.mode, self._pipeline.message_char_limit)
        delivered = claimed and self._push(metadata, summary, short)
        return JobOutcome(
            status=JobStatus.DONE,
            transcript=transcript,
            summary=short,
            mode=summary.mode,
            delivered=delivered,
        )

    def _summarize(self, transcript: str) -> ConsolidatedSummary:
        mode = classify_mode(transcript)
        segments = split_transcript(
            transcript, self._pipeline.chunk_max_chars, self._pipeline.chunk_lookahead
        )
        logger.info(
            "Summarizing transcript",
            extra={"mode": mode, "segments": len(segments), "chars": len(transcript)},
        )
        partials = self._summarizer.summarize_all(segments, mode, transcript)
        return self._reducer.reduce(partials, mode)

    def _push(
        self, metadata: JobMetadata, summary: ConsolidatedSummary, short: str
    ) -> bool:
        messages = [short] + format_detail(
            summary, summary.mode, self._pipeline.message_char_limit
        )
        try:
            self._messenger.push(metadata.user_id, messages)
        except MessagingError:
            # the claim stays; a failed push is not retried
            logger.error(
                "Delivery failed after claim",
                extra={"job_id": metadata.job_id, "user_id": metadata.user_id},
            )
            return False
        return True

    def _put_text(self, object_name: str, text: str, content_type: str) -> None:
        payload = text.encode("utf-8")
        self._storage.upload(object_name, io.BytesIO(payload), len(payload), content_type)

    def _store_transcript(self, metadata: JobMetadata, transcript: str) -> None:
        self._put_text(
            transcript_object_name(metadata.session_id, "txt"),
            transcript,
            "text/plain; charset=utf-8",
        )
        artifact = TranscriptArtifact(
            job_id=metadata.job_id,
            session_id=metadata.session_id,
            user_id=metadata.user_id,
            audio_uri=metadata.audio_uri,
            transcript=transcript,
        )
        self._put_text(
            transcript_object_name(metadata.session_id, "json"),
            artifact.model_dump_json(indent=2),
            "application/json",
        )

    def _load_summary(self, session_id: str) -> ConsolidatedSummary | None:
        name = summary_object_name(session_id, "json")
        if not self._storage.exists(name):
            return None
        logger.info("Reusing stored summary", extra={"session_id": session_id})
        return ConsolidatedSummary.model_validate_json(self._storage.download(name))

    def _store_summary(
        self, session_id: str, summary: ConsolidatedSummary, transcript: str
    ) -> None:
        self._put_text(
            summary_object_name(session_id, "json"),
            summary.model_dump_json(indent=2),
            "application/json",
        )
        self._put_text(
            summary_object_name(session_id, "txt"),
            format_document(summary, transcript),
            "text/plain; charset=utf-8",
        )
