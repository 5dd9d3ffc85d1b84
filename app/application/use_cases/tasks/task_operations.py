"""Task operations: cached reads and owner-scoped writes (delegate to ITaskRepository)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from app.application.dtos.pagination import Page, PageRequest
from app.application.dtos.task import TaskCreate, TaskResult
from app.application.interfaces.repositories import ITaskRepository
from app.application.interfaces.services import ITaggedCache
from app.application.services.cached_retrieval import CachedRetrievalService
from app.core.constants import DEFAULT_CACHE_TTL
from app.domain.enums import TaskStatus
from app.domain.exceptions import ResourceNotFoundException, ValidationException

# Filter names understood by the task query; anything else is dropped before keying.
TASK_FILTERS = ("search", "status")


def _clean_filters(filters: Mapping[str, Any]) -> dict[str, Any]:
    """Keep known, non-empty filters so equivalent requests share one cache key."""
    return {
        name: filters[name]
        for name in TASK_FILTERS
        if filters.get(name) not in (None, "")
    }


def _validate_status(status: Any) -> str:
    try:
        return TaskStatus(status).value
    except ValueError as e:
        raise ValidationException(
            f"status must be one of: {', '.join(TaskStatus.values())}", field="status"
        ) from e


class TaskService:
    """List, read, create, update and delete tasks for one request's principal.

    Reads go through CachedRetrievalService. Writes go through the scoped
    repository, whose post-commit hooks invalidate the cache.
    """

    def __init__(
        self,
        task_repo: ITaskRepository,
        cache: ITaggedCache | None = None,
        *,
        cache_ttl: int = DEFAULT_CACHE_TTL,
    ) -> None:
        self.task_repo = task_repo
        self.retrieval: CachedRetrievalService[TaskResult] = CachedRetrievalService(
            task_repo, cache, ttl=cache_ttl
        )

    async def list(
        self, filters: Mapping[str, Any], page_request: PageRequest
    ) -> Page[TaskResult]:
        """Return a page of the principal's tasks (cached)."""
        cleaned = _clean_filters(filters)
        if "status" in cleaned:
            cleaned["status"] = _validate_status(cleaned["status"])
        return await self.retrieval.list(cleaned, page_request)

    async def get_by_id(self, task_id: str) -> TaskResult:
        """Return one of the principal's tasks (cached). Raises ResourceNotFoundException."""
        return await self.retrieval.get_by_id(task_id)

    async def get_for_write(self, task_id: str) -> Any:
        """Load the Task entity for update/delete, bypassing the cache.

        Raises:
            ResourceNotFoundException: Absent or owned by another principal.
        """
        task = await self.task_repo.find_by_id(task_id)
        if task is None:
            raise ResourceNotFoundException("task", task_id)
        return task

    async def create(self, data: TaskCreate) -> TaskResult:
        """Create a task owned by the principal; list pages are invalidated."""
        if not data.title or not data.title.strip():
            raise ValidationException("title must not be empty", field="title")
        data = TaskCreate(
            title=data.title.strip(),
            description=data.description,
            status=_validate_status(data.status),
        )
        task = await self.task_repo.create_task(data)
        return self.task_repo.to_result(task)

    async def update(self, task: Any, data: Mapping[str, Any]) -> TaskResult:
        """Apply a partial update; the task's item entry and list pages are invalidated."""
        changes = dict(data)
        if "status" in changes:
            changes["status"] = _validate_status(changes["status"])
        if "title" in changes:
            title = changes["title"]
            if not title or not str(title).strip():
                raise ValidationException("title must not be empty", field="title")
            changes["title"] = str(title).strip()
        updated = await self.task_repo.update(task, changes)
        return self.task_repo.to_result(updated)

    async def delete(self, task: Any) -> None:
        """Delete the task; its item entry and list pages are invalidated."""
        await self.task_repo.delete(task)
