"""Task API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import TaskStatus


class TaskCreateRequest(BaseModel):
    """Request body for creating a task. Owner is the authenticated principal."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=10000)
    status: TaskStatus = TaskStatus.PENDING


class TaskUpdateRequest(BaseModel):
    """Request body for PATCH (partial update). Owner and id cannot be changed."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=10000)
    status: TaskStatus | None = None


class TaskResponse(BaseModel):
    """Task full response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    description: str | None
    status: str
    created_at: datetime | None
    updated_at: datetime | None


class PageMeta(BaseModel):
    """Pagination metadata for list responses."""

    current_page: int
    per_page: int
    total: int
    last_page: int


class TaskListResponse(BaseModel):
    """Paginated task list."""

    data: list[TaskResponse]
    meta: PageMeta
