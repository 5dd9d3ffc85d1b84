"""DTOs for tasks (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from app.shared.utils import parse_utc


@dataclass(frozen=True)
class TaskCreate:
    """Fields a principal may set when creating a task. Owner is never among them."""

    title: str
    description: str | None = None
    status: str = "pending"


@dataclass(frozen=True)
class TaskResult:
    """Task as returned to callers and stored in the cache."""

    id: str
    user_id: str
    title: str
    description: str | None
    status: str
    created_at: datetime | None
    updated_at: datetime | None


def task_to_cache(task: TaskResult) -> dict[str, Any]:
    """Serialize TaskResult to a JSON-safe dict (ISO datetimes)."""
    return {
        "id": task.id,
        "user_id": task.user_id,
        "title": task.title,
        "description": task.description,
        "status": task.status,
        "created_at": task.created_at.isoformat() if task.created_at else None,
        "updated_at": task.updated_at.isoformat() if task.updated_at else None,
    }


def task_from_cache(cached: dict[str, Any]) -> TaskResult:
    """Build a TaskResult from a cache dict; deserializes ISO datetime fields."""
    data = dict(cached)
    for dt_field in ("created_at", "updated_at"):
        data[dt_field] = parse_utc(data.get(dt_field))
    return TaskResult(**data)
