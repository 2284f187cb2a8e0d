"""Health check endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends

from pomocal import __version__
from pomocal.api.dependencies import get_context
from pomocal.api.models.responses import HealthResponse
from pomocal.runtime import RuntimeContext

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(context: RuntimeContext = Depends(get_context)):
    """Liveness probe; calendar state is informational only."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        calendar_configured=context.settings.has_google_credentials,
        calendar_cache_fresh=context.cache.is_fresh(),
        timestamp=datetime.now(UTC).isoformat(),
    )
