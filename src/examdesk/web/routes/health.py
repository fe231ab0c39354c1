"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from examdesk import __version__
from examdesk.web.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check API health status."""
    return HealthResponse(
        status="ok",
        version=__version__,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "API works. Endpoints under /api, docs at /docs"
