"""Abstract interface for transcription job metadata persistence."""

from abc import ABC, abstractmethod

from yorisoi.domain.models import JobMetadata


class JobRepository(ABC):
    """Abstract base class for a durable job metadata store."""

    @abstractmethod
    def save(self, metadata: JobMetadata) -> None:
        """
        Stores the metadata of a submitted job.

        Raises:
            StorageUploadError: If the write fails.
        """

    @abstractmethod
    def get(self, job_id: str) -> JobMetadata:
        """
        Reads the metadata of a job.

        Raises:
            JobNotFoundError: If no metadata exists for this job.
        """
