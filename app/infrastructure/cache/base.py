"""Shared behavior of tagged cache backends: tag validation and remember()."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from app.domain.exceptions import CacheUnavailableException

logger = logging.getLogger(__name__)


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Return sorted, de-duplicated tags; raise ValueError when none are given.

    An untagged entry could never be invalidated on mutation, so it is refused.
    """
    normalized = sorted({t for t in tags if t})
    if not normalized:
        raise ValueError("Cache entries require at least one tag")
    return normalized


class BaseTaggedCache:
    """Read-through helper on top of backend get/set.

    Subclasses implement get, set, delete, invalidate_tags and is_available,
    raising CacheUnavailableException when the backend cannot be reached.
    """

    async def get(self, key: str) -> Any:
        raise NotImplementedError

    async def set(self, key: str, value: Any, ttl: int, tags: Iterable[str]) -> None:
        raise NotImplementedError

    async def remember(
        self,
        key: str,
        tags: Iterable[str],
        ttl: int,
        compute: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Return cached value for key or compute, store and return it.

        A backend failure on read falls back to compute(); a failure while
        storing is logged and the computed value is still returned. Errors
        raised by compute() propagate and nothing is stored.
        """
        tag_list = normalize_tags(tags)
        try:
            cached = await self.get(key)
        except CacheUnavailableException as e:
            logger.warning(
                "Cache read unavailable for key %s; serving from store (%s)",
                key,
                e.details.get("reason"),
            )
            return await compute()
        if cached is not None:
            return cached
        value = await compute()
        try:
            await self.set(key, value, ttl, tag_list)
        except CacheUnavailableException as e:
            logger.warning(
                "Cache write unavailable for key %s; value not cached (%s)",
                key,
                e.details.get("reason"),
            )
        return value
