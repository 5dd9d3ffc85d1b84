"""Application services: cache keys, cached retrieval, cache invalidation."""

from app.application.services.cache_invalidator import CacheInvalidator
from app.application.services.cached_retrieval import CachedRetrievalService

__all__ = [
    "CacheInvalidator",
    "CachedRetrievalService",
]
