"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, cache backends).
"""

from app.application.interfaces import (
    ICacheInvalidator,
    IOwnerScope,
    IScopedRecordRepository,
    ITaggedCache,
    ITaskRepository,
)
from app.application.services import CacheInvalidator, CachedRetrievalService
from app.application.use_cases import TaskService

__all__ = [
    "CacheInvalidator",
    "CachedRetrievalService",
    "ICacheInvalidator",
    "IOwnerScope",
    "IScopedRecordRepository",
    "ITaggedCache",
    "ITaskRepository",
    "TaskService",
]
