"""Service interfaces (ports) for the application layer.

Protocols define contracts for application services (DIP).
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.domain.record_type import RecordType


# Tagged cache interface
class ITaggedCache(Protocol):
    """Protocol for tag-capable cache backends (Redis, in-memory).

    Backends raise CacheUnavailableException when they cannot be reached.
    Every entry carries at least one tag; set() with no tags raises ValueError.
    """

    def is_available(self) -> bool:
        """Return True if cache is connected and usable."""

    async def get(self, key: str) -> Any:
        """Return cached value or None."""

    async def set(self, key: str, value: Any, ttl: int, tags: Iterable[str]) -> None:
        """Store value with TTL in seconds under every tag in tags."""

    async def delete(self, key: str) -> None:
        """Remove key from cache."""

    async def invalidate_tags(self, tags: Iterable[str]) -> int:
        """Drop every entry carrying any of tags. Returns number of keys removed."""

    async def remember(
        self,
        key: str,
        tags: Iterable[str],
        ttl: int,
        compute: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Return cached value for key, or compute, store under tags, and return it.

        Falls back to compute() when the backend is unreachable.
        """


# Cache invalidator interface
class ICacheInvalidator(Protocol):
    """Protocol for the post-commit cache invalidation hook used by repositories."""

    async def record_created(self, record_type: RecordType) -> bool:
        """Drop the collection tag of record_type. Returns False if the cache failed."""

    async def record_changed(self, record_type: RecordType, record_id: str) -> bool:
        """Drop the collection and item tags of one record. Returns False if the cache failed."""
