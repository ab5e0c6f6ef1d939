"""Request and response models for the HTTP API."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from yorisoi.domain.models import JobStatus, SummaryMode


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignUploadRequest(_CamelModel):
    """Request for a signed chunk upload URL."""

    session_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    seq: int = Field(..., ge=1)
    content_type: str = ""


class SignUploadResponse(_CamelModel):
    """Signed URL the client PUTs one chunk to."""

    ok: bool = True
    signed_url: str
    object_path: str


class FinalizeRequest(_CamelModel):
    """Request to assemble a session and start transcription."""

    session_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)


class FinalizeResponse(_CamelModel):
    ok: bool = True
    job_id: str


class JobResponse(_CamelModel):
    """State of a transcription job and, when done, its note."""

    ok: bool = True
    status: JobStatus
    transcript: str | None = None
    summary: str | None = None
    mode: SummaryMode | None = None


class OkResponse(BaseModel):
    ok: bool = True
