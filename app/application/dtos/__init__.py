"""Application DTOs: plain dataclasses passed between layers (no ORM)."""

from app.application.dtos.pagination import Page, PageRequest
from app.application.dtos.task import (
    TaskCreate,
    TaskResult,
    task_from_cache,
    task_to_cache,
)

__all__ = [
    "Page",
    "PageRequest",
    "TaskCreate",
    "TaskResult",
    "task_from_cache",
    "task_to_cache",
]
