"""Session finalize endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from yorisoi.dependencies import get_finalize_handler
from yorisoi.exceptions import NoChunksFoundError
from yorisoi.handlers.finalize_handler import FinalizeHandler
from yorisoi.logging import setup_logging
from yorisoi.response_models import FinalizeRequest, FinalizeResponse

logger = setup_logging()

router = APIRouter(tags=["sessions"])

FinalizeHandlerDep = Annotated[FinalizeHandler, Depends(get_finalize_handler)]


@router.post("/finalize", response_model=FinalizeResponse)
def finalize_session(body: FinalizeRequest, handler: FinalizeHandlerDep) -> FinalizeResponse:
    """Assembles the uploaded chunks of a session and starts transcription."""
    try:
        result = handler.process(body.session_id, body.user_id)
    except NoChunksFoundError:
        raise HTTPException(status_code=400, detail="no chunks uploaded for this session")
    except Exception as e:
        logger.exception("Finalize failed", extra={"session_id": body.session_id})
        raise HTTPException(status_code=500, detail=str(e))

    return FinalizeResponse(job_id=result.job_id)
