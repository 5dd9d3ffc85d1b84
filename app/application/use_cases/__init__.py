"""Application use cases (orchestrate repositories and services)."""

from app.application.use_cases.tasks import TaskService

__all__ = ["TaskService"]
