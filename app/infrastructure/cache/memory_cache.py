"""In-process tagged cache with TTL enforcement.

For development (CACHE_BACKEND=memory) and tests. Not shared between
processes, so it does not satisfy multi-instance deployments. Values are
round-tripped through JSON like the Redis backend, so callers never share
mutable state with the cache.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from app.infrastructure.cache.base import BaseTaggedCache, normalize_tags

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    payload: str
    expires_at: float
    tags: frozenset[str]


class InMemoryTaggedCache(BaseTaggedCache):
    """Dict-backed ITaggedCache implementation."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._tags: dict[str, set[str]] = {}  # tag -> {keys}

    def is_available(self) -> bool:
        return True

    def _drop(self, key: str) -> bool:
        entry = self._entries.pop(key, None)
        if entry is None:
            return False
        for tag in entry.tags:
            members = self._tags.get(tag)
            if members is not None:
                members.discard(key)
                if not members:
                    del self._tags[tag]
        return True

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache MISS: %s", key)
            return None
        if entry.expires_at <= self._clock():
            self._drop(key)
            logger.debug("Cache EXPIRED: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        return json.loads(entry.payload)

    async def set(self, key: str, value: Any, ttl: int, tags: Iterable[str]) -> None:
        tag_list = normalize_tags(tags)
        self._drop(key)
        self._entries[key] = _Entry(
            payload=json.dumps(value),
            expires_at=self._clock() + ttl,
            tags=frozenset(tag_list),
        )
        for tag in tag_list:
            self._tags.setdefault(tag, set()).add(key)
        logger.debug("Cache SET: %s (TTL: %ss, tags: %s)", key, ttl, tag_list)

    async def delete(self, key: str) -> None:
        self._drop(key)

    async def invalidate_tags(self, tags: Iterable[str]) -> int:
        tag_list = sorted(set(tags))
        keys: set[str] = set()
        for tag in tag_list:
            keys |= self._tags.get(tag, set())
        deleted = sum(1 for key in sorted(keys) if self._drop(key))
        logger.info("Cache INVALIDATE: tags=%s (%s keys)", tag_list, deleted)
        return deleted

    def keys(self) -> set[str]:
        """Keys currently held (including not-yet-evicted expired ones)."""
        return set(self._entries)
