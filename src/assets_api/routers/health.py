from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from assets_api.schemas import HealthResponse

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
def root() -> str:
    """Plain-text banner so a browser hitting the base URL sees something."""
    return "Assets API is running"


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Liveness only. Does not touch S3 or DynamoDB."""
    return HealthResponse(ok=True)
