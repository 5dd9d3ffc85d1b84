"""Task use cases."""

from app.application.use_cases.tasks.task_operations import TASK_FILTERS, TaskService

__all__ = [
    "TASK_FILTERS",
    "TaskService",
]
