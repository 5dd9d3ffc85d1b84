"""Cache: tagged cache backends (Redis and in-process).

Used by the cached retrieval service (reads) and the cache invalidator
(mutations) through app.application.interfaces.ITaggedCache. Backend is
chosen by build_cache() from settings; key format lives in
app.application.services.cache_keys (DRY).
"""

from app.core.config import get_settings
from app.infrastructure.cache.base import BaseTaggedCache, normalize_tags
from app.infrastructure.cache.memory_cache import InMemoryTaggedCache
from app.infrastructure.cache.redis_cache import RedisTaggedCache, tag_index_key


async def build_cache() -> RedisTaggedCache | InMemoryTaggedCache:
    """Create and connect the cache backend selected by CACHE_BACKEND."""
    settings = get_settings()
    if settings.cache_backend == "memory":
        return InMemoryTaggedCache()
    cache = RedisTaggedCache()
    await cache.connect()
    return cache


__all__ = [
    "BaseTaggedCache",
    "InMemoryTaggedCache",
    "RedisTaggedCache",
    "build_cache",
    "normalize_tags",
    "tag_index_key",
]
