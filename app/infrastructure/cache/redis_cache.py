"""Redis-based tagged cache.

Values are stored as JSON with SETEX. Each tag is a Redis set (tag:<tag>)
holding the keys stored under it, so invalidating a tag touches only its
members and never scans the keyspace. Connection errors are retried once
(the pool replaces the broken connection) and then surface as
CacheUnavailableException.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

import redis.asyncio as redis

from app.core.config import get_settings
from app.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_TAG
from app.domain.exceptions import CacheUnavailableException
from app.infrastructure.cache.base import BaseTaggedCache, normalize_tags

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNLINK_CHUNK_SIZE = 500


def tag_index_key(tag: str) -> str:
    """Redis key of the set that indexes the members of tag."""
    return f"{CACHE_PREFIX_TAG}{CACHE_KEY_SEP}{tag}"


class RedisTaggedCache(BaseTaggedCache):
    """Async Redis tagged cache shared by all application instances.

    Uses app.core.config for connection settings. Call connect() at
    startup and disconnect() at shutdown.
    """

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """Initialize cache service.

        Args:
            redis_client: Optional Redis client for testing or DI.
        """
        self.redis = redis_client
        self.settings = get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Create the client and ping it. Call on app startup.

        A failed ping leaves the client in place: every later call retries
        through the connection pool, so a cache that comes back is used again.
        """
        if self.redis is None:
            self.redis = redis.Redis(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                password=(
                    self.settings.redis_password.get_secret_value()
                    if self.settings.redis_password
                    else None
                ),
                decode_responses=True,
                socket_timeout=self.settings.redis_socket_timeout,
                socket_connect_timeout=self.settings.redis_socket_timeout,
                socket_keepalive=True,
                max_connections=self.settings.redis_max_connections,
            )
        try:
            await self.redis.ping()
            self._connected = True
            logger.info(
                "Redis cache connected: %s:%s",
                self.settings.redis_host,
                self.settings.redis_port,
            )
        except (redis.ConnectionError, redis.TimeoutError) as e:
            self._connected = False
            logger.warning("Redis connection failed: %s. Reads fall back to the store.", e)

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    def is_available(self) -> bool:
        """Return True if the last Redis round trip succeeded."""
        return self._connected and self.redis is not None

    async def _execute(
        self, operation: str, command: Callable[[redis.Redis], Awaitable[T]]
    ) -> T:
        """Run command against Redis; retry once on connection errors.

        Raises:
            CacheUnavailableException: Client missing or Redis unreachable.
        """
        if self.redis is None:
            raise CacheUnavailableException(operation, "redis client not initialized")
        try:
            result = await command(self.redis)
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.debug("Redis %s failed (%s); retrying once", operation, e)
            try:
                result = await command(self.redis)
            except redis.RedisError as retry_error:
                self._connected = False
                raise CacheUnavailableException(operation, str(retry_error)) from retry_error
        except redis.RedisError as e:
            raise CacheUnavailableException(operation, str(e)) from e
        self._connected = True
        return result

    async def get(self, key: str) -> Any | None:
        """Return cached value (JSON-deserialized) or None if missing.

        Args:
            key: Cache key (see app.application.services.cache_keys).

        Returns:
            Cached value or None.
        """
        value = await self._execute("get", lambda r: r.get(key))
        if value is None:
            logger.debug("Cache MISS: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        return json.loads(value)

    async def set(self, key: str, value: Any, ttl: int, tags: Iterable[str]) -> None:
        """Store value with TTL and register key in every tag index.

        An index set never expires before the longest-lived entry it holds
        (EXPIRE NX then GT, Redis 7+).
        Runs as one MULTI/EXEC so an entry never exists outside its tags.
        """
        tag_list = normalize_tags(tags)
        serialized = json.dumps(value)

        async def _set(r: redis.Redis) -> list[Any]:
            async with r.pipeline(transaction=True) as pipe:
                pipe.setex(key, ttl, serialized)
                for tag in tag_list:
                    index = tag_index_key(tag)
                    pipe.sadd(index, key)
                    pipe.expire(index, ttl, nx=True)
                    pipe.expire(index, ttl, gt=True)
                return await pipe.execute()

        await self._execute("set", _set)
        logger.debug("Cache SET: %s (TTL: %ss, tags: %s)", key, ttl, tag_list)

    async def delete(self, key: str) -> None:
        """Remove key from cache. Stale index members are ignored on invalidation."""
        await self._execute("delete", lambda r: r.unlink(key))
        logger.debug("Cache DELETE: %s", key)

    async def invalidate_tags(self, tags: Iterable[str]) -> int:
        """Drop every entry indexed under any of tags.

        Only the members read here are removed from each index (SREM), so a
        key stored under the tag concurrently stays indexed. Invalidating an
        empty or unknown tag removes nothing and is not an error.

        Returns:
            Number of keys unlinked.
        """
        tag_list = sorted(set(tags))
        if not tag_list:
            return 0

        async def _invalidate(r: redis.Redis) -> int:
            async with r.pipeline(transaction=False) as pipe:
                for tag in tag_list:
                    pipe.smembers(tag_index_key(tag))
                member_sets = await pipe.execute()
            members_by_tag = dict(zip(tag_list, member_sets))
            keys = sorted(set().union(*member_sets))
            deleted = 0
            for start in range(0, len(keys), _UNLINK_CHUNK_SIZE):
                chunk = keys[start : start + _UNLINK_CHUNK_SIZE]
                deleted += int(await r.unlink(*chunk) or 0)
            async with r.pipeline(transaction=False) as pipe:
                for tag, members in members_by_tag.items():
                    if members:
                        pipe.srem(tag_index_key(tag), *members)
                await pipe.execute()
            return deleted

        deleted = await self._execute("invalidate_tags", _invalidate)
        logger.info("Cache INVALIDATE: tags=%s (%s keys)", tag_list, deleted)
        return deleted
