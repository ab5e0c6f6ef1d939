"""Abstract interface for long-running transcription backends."""

from abc import ABC, abstractmethod

from yorisoi.domain.recognition import RecognitionPayload


class TranscriptionService(ABC):
    """Abstract base class for asynchronous speech recognition backends."""

    @abstractmethod
    def submit(self, audio_url: str, language_code: str) -> str:
        """
        Starts a long-running recognition job and returns immediately.

        Args:
            audio_url: URL the backend can fetch the waveform from.
            language_code: Language of the recording.

        Returns:
            The opaque job id assigned by the backend.

        Raises:
            TranscriptionError: If the job cannot be submitted.
        """

    @abstractmethod
    def fetch(self, job_id: str) -> list[RecognitionPayload]:
        """
        Fetches the current state of a job.

        Every response representation the backend can offer is returned, in
        order of preference, so the caller can retry extraction through each.

        Raises:
            TranscriptionError: If the backend cannot be reached.
        """
