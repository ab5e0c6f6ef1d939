"""Domain models for the visit-note pipeline."""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, Field, field_validator

SummaryMode = Literal["surgery", "bridge", "normal"]

CHUNK_NAME_PATTERN = re.compile(r"chunk-(\d+)\.(webm|mp4)$")


def chunk_object_name(session_id: str, seq: int, ext: str) -> str:
    return f"sessions/{session_id}/chunk-{seq:05d}.{ext}"


def session_prefix(session_id: str) -> str:
    return f"sessions/{session_id}/"


def assembled_object_name(session_id: str, ext: str) -> str:
    return f"sessions/{session_id}/assembled.{ext}"


def waveform_object_name(session_id: str) -> str:
    return f"audio/{session_id}.wav"


def transcript_object_name(session_id: str, ext: str) -> str:
    return f"transcripts/{session_id}.{ext}"


def summary_object_name(session_id: str, ext: str) -> str:
    return f"summaries/{session_id}.{ext}"


def job_object_name(job_id: str) -> str:
    return f"jobs/{job_id}.json"


def delivery_marker_key(job_id: str) -> str:
    return f"deliveries/{job_id}.done"


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        return "\n".join(_coerce_text(v) for v in value if v is not None).strip()
    return str(value).strip()


def _coerce_text_list(value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value] if value.strip() else []
    if not isinstance(value, list):
        return []
    items = []
    for v in value:
        if isinstance(v, dict):
            # e.g. {"name": "ロキソニン", "dose": "60mg"}
            v = " / ".join(_coerce_text(x) for x in v.values() if _coerce_text(x))
        items.append(_coerce_text(v))
    return [item for item in items if item]


def _coerce_mapping(value: Any) -> Any:
    return value if isinstance(value, (dict, BaseModel)) else {}


def _coerce_mapping_list(value: Any) -> list:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, (dict, BaseModel))]


Text = Annotated[str, BeforeValidator(_coerce_text)]
TextList = Annotated[list[str], BeforeValidator(_coerce_text_list)]


class MedicalInfo(BaseModel):
    """Medical vocabulary mentioned during the visit."""

    terms: TextList = Field(default_factory=list)
    medications: TextList = Field(default_factory=list)
    tests: TextList = Field(default_factory=list)


MedicalField = Annotated[MedicalInfo, BeforeValidator(_coerce_mapping)]


class PartialSummary(BaseModel):
    """Structured summary of one transcript segment."""

    summary: Text = ""
    action_items: TextList = Field(default_factory=list)
    medical: MedicalField = Field(default_factory=MedicalInfo)
    lifestyle_notes: TextList = Field(default_factory=list)
    red_flags: TextList = Field(default_factory=list)
    follow_up_questions: TextList = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (
            self.summary
            or self.action_items
            or self.lifestyle_notes
            or self.red_flags
            or self.follow_up_questions
            or self.medical.terms
            or self.medical.medications
            or self.medical.tests
        )


SHORT_CARD_LIMIT = 3


class ShortCard(BaseModel):
    """Bounded, high-priority part of the consolidated summary."""

    greeting: Text = ""
    top_summary: TextList = Field(default_factory=list)
    top_actions: TextList = Field(default_factory=list)
    top_red_flags: TextList = Field(default_factory=list)

    @field_validator("top_summary", "top_actions", "top_red_flags")
    @classmethod
    def _cap(cls, value: list[str]) -> list[str]:
        return value[:SHORT_CARD_LIMIT]


class TopicBlock(BaseModel):
    """One topic discussed during the visit with all its points."""

    title: Text = ""
    points: TextList = Field(default_factory=list)


class DetailedSection(BaseModel):
    """Unbounded expansion of the summary; never truncated."""

    topics: Annotated[list[TopicBlock], BeforeValidator(_coerce_mapping_list)] = Field(
        default_factory=list
    )
    timeline: TextList = Field(default_factory=list)
    medical: MedicalField = Field(default_factory=MedicalInfo)
    lifestyle_notes: TextList = Field(default_factory=list)
    questions_for_next_visit: TextList = Field(default_factory=list)
    safety_footer: Text = ""


class ConsolidatedSummary(BaseModel):
    """Result of reducing every partial summary of a job."""

    mode: SummaryMode = "normal"
    short: Annotated[ShortCard, BeforeValidator(_coerce_mapping)] = Field(
        default_factory=ShortCard
    )
    detailed: Annotated[DetailedSection, BeforeValidator(_coerce_mapping)] = Field(
        default_factory=DetailedSection
    )


class JobStatus(str, Enum):
    RUNNING = "RUNNING"
    DONE = "DONE"


class JobMetadata(BaseModel, frozen=True):
    """Linkage persisted when a transcription job is submitted."""

    job_id: str
    session_id: str
    user_id: str
    audio_uri: str
    language_code: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class PollResult(BaseModel, frozen=True):
    """State of a transcription job as seen by one poll."""

    status: JobStatus
    transcript: str | None = None


class TranscriptArtifact(BaseModel):
    """Structured transcript artifact stored next to the plain text."""

    job_id: str
    session_id: str
    user_id: str
    audio_uri: str
    transcript: str


class ClaimResult(BaseModel, frozen=True):
    """Outcome of trying to claim the delivery of a job's notification."""

    acquired: bool


class CleanupReport(BaseModel):
    """Result of a best-effort cleanup; failures never raise."""

    succeeded: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)

    def merge(self, other: "CleanupReport") -> "CleanupReport":
        return CleanupReport(
            succeeded=self.succeeded + other.succeeded,
            failed=self.failed + other.failed,
        )


class FinalizeResult(BaseModel, frozen=True):
    """Result of assembling a session and starting its transcription."""

    job_id: str
    session_id: str
    audio_object_name: str
    chunk_count: int


class JobOutcome(BaseModel):
    """What a poll of a job returns to the caller."""

    status: JobStatus
    transcript: str | None = None
    summary: str | None = None
    mode: SummaryMode | None = None
    delivered: bool = False
