"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.base import ScopedRepository
from app.infrastructure.persistence.repositories.task_repo import TaskRepository

__all__ = [
    "ScopedRepository",
    "TaskRepository",
]
