"""Transcription job polling endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from yorisoi.dependencies import get_poll_handler
from yorisoi.exceptions import JobNotFoundError
from yorisoi.handlers.job_poll_handler import JobPollHandler
from yorisoi.logging import setup_logging
from yorisoi.response_models import JobResponse

logger = setup_logging()

router = APIRouter(prefix="/jobs", tags=["jobs"])

PollHandlerDep = Annotated[JobPollHandler, Depends(get_poll_handler)]


@router.get("/{job_id}", response_model=JobResponse, response_model_exclude_none=True)
def get_job(job_id: str, handler: PollHandlerDep) -> JobResponse:
    """Returns the job state; a finished job also returns its transcript and note."""
    try:
        outcome = handler.process(job_id)
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")
    except Exception as e:
        logger.exception("Job poll failed", extra={"job_id": job_id})
        raise HTTPException(status_code=500, detail=str(e))

    return JobResponse(
        status=outcome.status,
        transcript=outcome.transcript,
        summary=outcome.summary,
        mode=outcome.mode,
    )
