"""Repository for transcription job metadata."""

import io

from yorisoi.domain.models import JobMetadata, job_object_name
from yorisoi.exceptions import JobNotFoundError
from yorisoi.infrastructure.interfaces.job_repository import JobRepository
from yorisoi.infrastructure.interfaces.storage import ObjectStorage
from yorisoi.logging import setup_logging

logger = setup_logging()


class ObjectStoreJobRepository(JobRepository):
    """
    Persists job metadata as JSON objects next to the audio artifacts.

    Any instance can read back what another instance wrote, so polls do not
    depend on the process that handled finalize.
    """

    def __init__(self, storage: ObjectStorage):
        self._storage = storage

    def save(self, metadata: JobMetadata) -> None:
        """
        Stores the metadata of a submitted job.

        Raises:
            StorageUploadError: If the write fails.
        """
        payload = metadata.model_dump_json(indent=2).encode("utf-8")
        self._storage.upload(
            job_object_name(metadata.job_id),
            io.BytesIO(payload),
            len(payload),
            "application/json",
        )
        logger.info(
            "Job metadata saved",
            extra={"job_id": metadata.job_id, "session_id": metadata.session_id},
        )

    def get(self, job_id: str) -> JobMetadata:
        """
        Reads the metadata of a job.

        Raises:
            JobNotFoundError: If no metadata was stored for this job.
            StorageDownloadError: If the object exists but cannot be read.
        """
        name = job_object_name(job_id)
        if not self._storage.exists(name):
            raise JobNotFoundError(job_id)
        return JobMetadata.model_validate_json(self._storage.download(name))
