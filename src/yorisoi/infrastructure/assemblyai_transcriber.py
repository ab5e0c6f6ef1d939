"""AssemblyAI implementation of the TranscriptionService interface."""

import assemblyai as aai

from yorisoi.domain.recognition import DirectResult, RecognitionPayload, WrappedOperation
from yorisoi.exceptions import TranscriptionError
from yorisoi.infrastructure.interfaces.transcription_service import TranscriptionService
from yorisoi.logging import setup_logging

logger = setup_logging()


class AssemblyAITranscriber(TranscriptionService):
    """Submits and polls asynchronous AssemblyAI transcripts."""

    def __init__(self, transcriber: aai.Transcriber, punctuate: bool = True):
        self._transcriber = transcriber
        self._punctuate = punctuate

    def submit(self, audio_url: str, language_code: str) -> str:
        """
        Queues a transcript for a remotely reachable audio file.

        ``Transcriber.submit`` returns as soon as the job is queued.
        """
        try:
            config = aai.TranscriptionConfig(
                language_code=language_code, punctuate=self._punctuate
            )
            transcript = self._transcriber.submit(audio_url, config=config)
            if transcript.status == aai.TranscriptStatus.error:
                raise TranscriptionError(audio_url, Exception(transcript.error))
            logger.info(
                "AssemblyAI transcript queued",
                extra={"job_id": transcript.id, "language_code": language_code},
            )
            return transcript.id
        except TranscriptionError:
            raise
        except Exception as e:
            logger.exception("AssemblyAI submit failed")
            raise TranscriptionError("submit", e) from e

    def fetch(self, job_id: str) -> list[RecognitionPayload]:
        """
        Fetches a transcript by id.

        Returns the SDK's transcript fields first and the raw JSON response
        second.
        """
        try:
            transcript = aai.Transcript.get_by_id(job_id)
        except Exception as e:
            logger.exception("AssemblyAI fetch failed", extra={"job_id": job_id})
            raise TranscriptionError(job_id, e) from e

        status = getattr(transcript.status, "value", transcript.status)
        payloads: list[RecognitionPayload] = [
            DirectResult(status=str(status), text=transcript.text, error=transcript.error)
        ]
        raw = transcript.json_response
        if isinstance(raw, dict):
            payloads.append(WrappedOperation(operation=raw))
        return payloads
