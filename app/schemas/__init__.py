"""Pydantic request/response schemas for the API."""

from app.schemas.health import HealthResponse, ReadinessResponse
from app.schemas.task import (
    PageMeta,
    TaskCreateRequest,
    TaskListResponse,
    TaskResponse,
    TaskUpdateRequest,
)

__all__ = [
    "HealthResponse",
    "PageMeta",
    "ReadinessResponse",
    "TaskCreateRequest",
    "TaskListResponse",
    "TaskResponse",
    "TaskUpdateRequest",
]
