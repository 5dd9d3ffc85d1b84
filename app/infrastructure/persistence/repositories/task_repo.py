"""Task repository: scoped task queries with search/status filters. Returns application DTOs."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.pagination import PageRequest
from app.application.dtos.task import (
    TaskCreate,
    TaskResult,
    task_from_cache,
    task_to_cache,
)
from app.infrastructure.persistence.models.task import Task
from app.infrastructure.persistence.repositories.base import ScopedRepository
from app.infrastructure.persistence.scoping import OwnerScope
from app.shared.utils import ensure_utc

if TYPE_CHECKING:
    from app.application.interfaces.services import ICacheInvalidator


def _to_result(t: Task) -> TaskResult:
    """Map Task ORM to TaskResult DTO."""
    return TaskResult(
        id=t.id,
        user_id=t.user_id,
        title=t.title,
        description=t.description,
        status=t.status,
        created_at=ensure_utc(t.created_at),
        updated_at=ensure_utc(t.updated_at),
    )


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class TaskRepository(ScopedRepository[Task]):
    """Task repository. Implements ITaskRepository.

    Filters: search (case-insensitive substring of title) and status
    (equality). Empty values are skipped; other names are ignored.
    """

    def __init__(
        self,
        db: AsyncSession,
        scope: OwnerScope,
        invalidator: ICacheInvalidator | None = None,
    ) -> None:
        super().__init__(db, Task, scope, invalidator)

    def _apply_filters(self, stmt: Select[Any], filters: Mapping[str, Any]) -> Select[Any]:
        search = filters.get("search")
        if search:
            stmt = stmt.where(Task.title.ilike(f"%{_escape_like(str(search))}%", escape="\\"))
        status = filters.get("status")
        if status:
            stmt = stmt.where(Task.status == str(status))
        return stmt

    def to_result(self, task: Task) -> TaskResult:
        return _to_result(task)

    async def get_result_by_id(self, task_id: str) -> TaskResult | None:
        """Scoped lookup mapped to TaskResult."""
        task = await self.find_by_id(task_id)
        return _to_result(task) if task else None

    async def list_results(
        self, filters: Mapping[str, Any], page_request: PageRequest
    ) -> tuple[list[TaskResult], int]:
        """Scoped, filtered page mapped to TaskResult."""
        rows, total = await self.paginate(filters, page_request)
        return [_to_result(t) for t in rows], total

    async def create_task(self, data: TaskCreate) -> Task:
        """Create a task owned by the scope's principal."""
        task = Task(title=data.title, description=data.description, status=data.status)
        return await self.create(task)

    def serialize(self, result: TaskResult) -> dict[str, Any]:
        return task_to_cache(result)

    def deserialize(self, cached: dict[str, Any]) -> TaskResult:
        return task_from_cache(cached)
