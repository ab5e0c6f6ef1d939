"""Custom exceptions for the yorisoi service."""


class StorageError(Exception):
    """Raised when an object store operation other than up/download fails."""

    def __init__(self, object_name: str, operation: str, cause: Exception | None = None):
        self.object_name = object_name
        self.operation = operation
        self.cause = cause
        super().__init__(f"Storage {operation} failed for '{object_name}'")


class StorageDownloadError(Exception):
    """Raised when downloading a file from storage fails."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        self.cause = cause
        super().__init__(f"Failed to download '{object_name}' from storage")


class StorageUploadError(Exception):
    """Raised when uploading a file to storage fails."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        self.cause = cause
        super().__init__(f"Failed to upload '{object_name}' to storage")


class CapabilityUnavailableError(Exception):
    """Raised when the storage backend cannot compose the requested objects."""

    def __init__(self, destination: str, reason: str, cause: Exception | None = None):
        self.destination = destination
        self.reason = reason
        self.cause = cause
        super().__init__(f"Cannot compose '{destination}': {reason}")


class TranscodeError(Exception):
    """Raised when the ffmpeg process fails; carries its diagnostic output."""

    def __init__(self, input_name: str, stderr: str, returncode: int | None = None):
        self.input_name = input_name
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(
            f"Transcoding '{input_name}' failed (exit {returncode}): {stderr.strip()}"
        )


class NoValidAudioError(Exception):
    """Raised when none of the uploaded chunks could be transcoded."""

    def __init__(self, chunk_count: int):
        self.chunk_count = chunk_count
        super().__init__(f"None of the {chunk_count} audio chunks could be transcoded")


class NoChunksFoundError(Exception):
    """Raised when finalize finds no uploaded chunks for a session."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"No chunks uploaded for session '{session_id}'")


class TranscriptionError(Exception):
    """Raised when submitting or fetching a transcription job fails."""

    def __init__(self, job_ref: str, cause: Exception | None = None):
        self.job_ref = job_ref
        self.cause = cause
        super().__init__(f"Transcription request failed for '{job_ref}'")


class RecognitionFailedError(Exception):
    """Raised when the recognition backend reports the job as failed."""

    def __init__(self, job_id: str, reason: str):
        self.job_id = job_id
        self.reason = reason
        super().__init__(f"Recognition job '{job_id}' failed: {reason}")


class ResultExtractionError(Exception):
    """Raised when no transcript can be extracted from a finished job."""

    def __init__(self, job_id: str, shapes_tried: list[str]):
        self.job_id = job_id
        self.shapes_tried = shapes_tried
        super().__init__(
            f"Could not extract transcript for job '{job_id}' "
            f"(tried: {', '.join(shapes_tried) or 'nothing'})"
        )


class JobNotFoundError(Exception):
    """Raised when no metadata exists for a job id."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job '{job_id}' not found")


class LLMServiceError(Exception):
    """Raised when LLM service call fails."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


class GenerationParseError(Exception):
    """Raised when generated text does not contain the expected JSON object."""

    def __init__(self, raw_text: str, cause: Exception | None = None):
        self.raw_text = raw_text
        self.cause = cause
        super().__init__(f"Could not parse generated JSON: {raw_text[:200]!r}")


class MarkerStoreError(Exception):
    """Raised when writing a delivery marker fails for a reason other than existence."""

    def __init__(self, key: str, cause: Exception | None = None):
        self.key = key
        self.cause = cause
        super().__init__(f"Failed to write marker '{key}'")


class MessagingError(Exception):
    """Raised when pushing or replying through the messaging channel fails."""

    def __init__(self, recipient: str, cause: Exception | None = None):
        self.recipient = recipient
        self.cause = cause
        super().__init__(f"Failed to send messages to '{recipient}'")
