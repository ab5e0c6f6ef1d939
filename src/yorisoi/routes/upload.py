"""Signed chunk upload endpoint."""

from datetime import timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from yorisoi.config import AppConfig
from yorisoi.dependencies import get_config, get_storage
from yorisoi.domain.models import chunk_object_name
from yorisoi.exceptions import StorageError
from yorisoi.infrastructure.interfaces.storage import ObjectStorage
from yorisoi.logging import setup_logging
from yorisoi.response_models import SignUploadRequest, SignUploadResponse

logger = setup_logging()

router = APIRouter(tags=["upload"])

StorageDep = Annotated[ObjectStorage, Depends(get_storage)]
ConfigDep = Annotated[AppConfig, Depends(get_config)]


@router.post("/sign-upload", response_model=SignUploadResponse)
def sign_upload(
    body: SignUploadRequest, storage: StorageDep, config: ConfigDep
) -> SignUploadResponse:
    """
    Returns a short-lived URL the client uploads one audio chunk to.

    The chunk is stored as ``mp4`` when the content type mentions mp4 and as
    ``webm`` otherwise.
    """
    ext = "mp4" if "mp4" in body.content_type else "webm"
    object_path = chunk_object_name(body.session_id, body.seq, ext)

    try:
        signed_url = storage.presigned_upload_url(
            object_path,
            timedelta(minutes=config.pipeline.upload_url_expiry_minutes),
        )
    except StorageError:
        raise HTTPException(status_code=500, detail="Could not sign upload URL")

    logger.info(
        "Upload URL signed",
        extra={
            "session_id": body.session_id,
            "user_id": body.user_id,
            "object_path": object_path,
        },
    )
    return SignUploadResponse(signed_url=signed_url, object_path=object_path)
