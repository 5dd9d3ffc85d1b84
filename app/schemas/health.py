"""Health check API schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    status: str = Field(default="ok", description="Service status")
    version: str | None = Field(default=None, description="Application version")


class ReadinessResponse(BaseModel):
    """Response for GET /health/ready.

    The service stays ready when the cache is down (reads fall back to the
    database), so cache state is reported rather than gating readiness.
    """

    status: str = Field(default="ok", description="Readiness status")
    cache: str = Field(..., description="Cache backend state: available or unavailable")
