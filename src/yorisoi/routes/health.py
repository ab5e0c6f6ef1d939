"""Health endpoint."""

from fastapi import APIRouter

from yorisoi.response_models import OkResponse

router = APIRouter(tags=["health"])


@router.get("/", response_model=OkResponse)
def health() -> OkResponse:
    return OkResponse()
