"""Tests for the in-process tagged cache and the shared remember() behavior."""

import pytest

from app.domain.exceptions import CacheUnavailableException
from app.infrastructure.cache import InMemoryTaggedCache, normalize_tags


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class UnreachableCache(InMemoryTaggedCache):
    """Backend whose every round trip fails."""

    def is_available(self) -> bool:
        return False

    async def get(self, key):
        raise CacheUnavailableException("get", "connection refused")

    async def set(self, key, value, ttl, tags):
        raise CacheUnavailableException("set", "connection refused")


def test_normalize_tags_sorts_and_dedupes() -> None:
    assert normalize_tags(["b", "a", "b"]) == ["a", "b"]


def test_normalize_tags_rejects_empty() -> None:
    with pytest.raises(ValueError, match="at least one tag"):
        normalize_tags([])


async def test_set_requires_tags() -> None:
    cache = InMemoryTaggedCache()
    with pytest.raises(ValueError):
        await cache.set("k", {"v": 1}, 60, [])


async def test_get_returns_copy_of_stored_value() -> None:
    cache = InMemoryTaggedCache()
    value = {"items": [1, 2]}
    await cache.set("k", value, 60, ["t"])
    value["items"].append(3)
    assert await cache.get("k") == {"items": [1, 2]}


async def test_entries_expire_after_ttl() -> None:
    clock = FakeClock()
    cache = InMemoryTaggedCache(clock=clock)
    await cache.set("k", "v", 10, ["t"])
    clock.now += 9
    assert await cache.get("k") == "v"
    clock.now += 1
    assert await cache.get("k") is None
    assert cache.keys() == set()


async def test_invalidate_tag_removes_every_member() -> None:
    cache = InMemoryTaggedCache()
    await cache.set("list:1", [1], 60, ["tasks"])
    await cache.set("item:1", {"id": 1}, 60, ["tasks", "task:1"])
    await cache.set("item:2", {"id": 2}, 60, ["tasks", "task:2"])
    await cache.set("other", "x", 60, ["notes"])

    assert await cache.invalidate_tags(["task:1"]) == 1
    assert cache.keys() == {"list:1", "item:2", "other"}

    assert await cache.invalidate_tags(["tasks"]) == 2
    assert cache.keys() == {"other"}


async def test_invalidate_is_idempotent() -> None:
    """Invalidating twice leaves the same state as once; unknown tags are no-ops."""
    cache = InMemoryTaggedCache()
    await cache.set("a", 1, 60, ["t"])
    await cache.set("b", 2, 60, ["u"])
    await cache.invalidate_tags(["t"])
    after_once = cache.keys()
    assert await cache.invalidate_tags(["t"]) == 0
    assert cache.keys() == after_once == {"b"}
    assert await cache.invalidate_tags(["never-used"]) == 0


async def test_overwrite_moves_key_between_tags() -> None:
    cache = InMemoryTaggedCache()
    await cache.set("k", 1, 60, ["old"])
    await cache.set("k", 2, 60, ["new"])
    await cache.invalidate_tags(["old"])
    assert await cache.get("k") == 2


class TestRemember:
    """remember(): read-through with fallback on backend failure."""

    async def test_computes_once_then_hits(self) -> None:
        cache = InMemoryTaggedCache()
        calls = []

        async def compute():
            calls.append(1)
            return {"n": len(calls)}

        assert await cache.remember("k", ["t"], 60, compute) == {"n": 1}
        assert await cache.remember("k", ["t"], 60, compute) == {"n": 1}
        assert len(calls) == 1

    async def test_requires_tags(self) -> None:
        cache = InMemoryTaggedCache()

        async def compute():
            return 1

        with pytest.raises(ValueError):
            await cache.remember("k", [], 60, compute)

    async def test_compute_error_propagates_and_nothing_stored(self) -> None:
        cache = InMemoryTaggedCache()

        async def compute():
            raise LookupError("missing")

        with pytest.raises(LookupError):
            await cache.remember("k", ["t"], 60, compute)
        assert cache.keys() == set()

    async def test_unreachable_backend_falls_back_to_compute(self, caplog) -> None:
        cache = UnreachableCache()

        async def compute():
            return "fresh"

        with caplog.at_level("WARNING"):
            assert await cache.remember("k", ["t"], 60, compute) == "fresh"
        assert "serving from store" in caplog.text
