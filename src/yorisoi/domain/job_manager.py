"""Submission and polling of long-running transcription jobs."""

from datetime import timedelta

from yorisoi.domain.models import JobMetadata, JobStatus, PollResult
from yorisoi.domain.recognition import resolve_recognition_payload
from yorisoi.exceptions import RecognitionFailedError, ResultExtractionError
from yorisoi.infrastructure.interfaces.job_repository import JobRepository
from yorisoi.infrastructure.interfaces.storage import ObjectStorage
from yorisoi.infrastructure.interfaces.transcription_service import TranscriptionService
from yorisoi.logging import setup_logging

logger = setup_logging()

AUDIO_URL_EXPIRY = timedelta(hours=12)


class TranscriptionJobManager:
    """Starts recognition jobs, records their linkage, and reports their state."""

    def __init__(
        self,
        transcriber: TranscriptionService,
        job_repository: JobRepository,
        storage: ObjectStorage,
        audio_url_expiry: timedelta = AUDIO_URL_EXPIRY,
    ):
        self._transcriber = transcriber
        self._jobs = job_repository
        self._storage = storage
        self._audio_url_expiry = audio_url_expiry

    def submit(
        self,
        audio_object_name: str,
        language_code: str,
        session_id: str,
        user_id: str,
    ) -> str:
        """
        Submits the waveform for recognition without waiting for the result.

        The job metadata is persisted before returning so any instance can
        later poll the job.

        Args:
            audio_object_name: Stored waveform to recognize.
            language_code: Language of the recording.
            session_id: Session the recording belongs to.
            user_id: Recipient of the eventual notification.

        Returns:
            The job id assigned by the recognition backend.

        Raises:
            TranscriptionError: If the backend rejects the submission.
            StorageUploadError: If the metadata cannot be persisted.
        """
        audio_url = self._storage.presigned_download_url(
            audio_object_name, self._audio_url_expiry
        )
        job_id = self._transcriber.submit(audio_url, language_code)
        self._jobs.save(
            JobMetadata(
                job_id=job_id,
                session_id=session_id,
                user_id=user_id,
                audio_uri=self._storage.object_uri(audio_object_name),
                language_code=language_code,
            )
        )
        logger.info(
            "Transcription job submitted",
            extra={"job_id": job_id, "session_id": session_id},
        )
        return job_id

    def metadata(self, job_id: str) -> JobMetadata:
        """
        Raises:
            JobNotFoundError: If the job was never submitted through this service.
        """
        return self._jobs.get(job_id)

    def poll(self, job_id: str) -> PollResult:
        """
        Reports whether a job is still running or done with its transcript.

        Every representation the backend returns is tried before giving up
        on extraction.

        Raises:
            RecognitionFailedError: If the backend reports the job as failed.
            ResultExtractionError: If the job is done but no representation
                carries a transcript.
            TranscriptionError: If the backend cannot be reached.
        """
        payloads = self._transcriber.fetch(job_id)
        resolved = [resolve_recognition_payload(p) for p in payloads]

        for result in resolved:
            if result.state == "failed":
                logger.error(
                    "Recognition job failed",
                    extra={"job_id": job_id, "reason": result.error},
                )
                raise RecognitionFailedError(job_id, result.error or "unknown error")

        for result in resolved:
            if result.state == "done" and result.text is not None:
                return PollResult(status=JobStatus.DONE, transcript=result.text.strip())

        if any(result.state == "done" for result in resolved):
            shapes = [p.kind for p in payloads]
            logger.error(
                "Recognition job done without extractable transcript",
                extra={"job_id": job_id, "shapes": shapes},
            )
            raise ResultExtractionError(job_id, shapes)

        return PollResult(status=JobStatus.RUNNING)
