"""Health check endpoints. No auth; used for liveness and readiness probes."""

from fastapi import APIRouter, Request

from app.core.config import get_settings
from app.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse(version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(request: Request) -> ReadinessResponse:
    """Report cache availability.

    Always 200: with the cache down, reads are served from the database and
    writes still commit, so the instance can take traffic.
    """
    cache = getattr(request.app.state, "cache", None)
    available = cache is not None and cache.is_available()
    return ReadinessResponse(cache="available" if available else "unavailable")
