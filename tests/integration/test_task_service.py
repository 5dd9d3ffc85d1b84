"""Integration tests for TaskService: cached reads, invalidation, ownership."""

import pytest

from app.application.dtos.pagination import PageRequest
from app.application.dtos.task import TaskCreate
from app.application.services.cache_invalidator import CacheInvalidator
from app.application.services.cache_keys import derive_item_key
from app.application.use_cases.tasks import TaskService
from app.domain.exceptions import (
    CacheUnavailableException,
    ResourceNotFoundException,
    UnauthenticatedAccessException,
    ValidationException,
)
from app.infrastructure.cache import InMemoryTaggedCache
from app.infrastructure.persistence.models import TASK_RECORD_TYPE
from app.infrastructure.persistence.repositories import TaskRepository
from app.infrastructure.persistence.scoping import OwnerScope


class CountingCache(InMemoryTaggedCache):
    """In-memory cache that records how often the store was consulted via remember()."""

    def __init__(self) -> None:
        super().__init__()
        self.computes = 0

    async def remember(self, key, tags, ttl, compute):
        async def _counted():
            self.computes += 1
            return await compute()

        return await super().remember(key, tags, ttl, _counted)


class InvalidationDownCache(InMemoryTaggedCache):
    """Reads and writes work; tag invalidation fails."""

    async def invalidate_tags(self, tags):
        raise CacheUnavailableException("invalidate_tags", "connection reset")


class UnreachableCache(InMemoryTaggedCache):
    def is_available(self) -> bool:
        return False

    async def get(self, key):
        raise CacheUnavailableException("get", "connection refused")

    async def set(self, key, value, ttl, tags):
        raise CacheUnavailableException("set", "connection refused")

    async def invalidate_tags(self, tags):
        raise CacheUnavailableException("invalidate_tags", "connection refused")


def _service(db_session, principal, cache) -> TaskService:
    repo = TaskRepository(
        db_session,
        OwnerScope.for_principal(principal),
        invalidator=CacheInvalidator(cache),
    )
    return TaskService(repo, cache, cache_ttl=300)


async def test_concrete_scenario(db_session, alice, bob, cache) -> None:
    """Create, list, cross-tenant lookup, update, then no stale read."""
    as_alice = _service(db_session, alice, cache)
    as_bob = _service(db_session, bob, cache)

    created = await as_alice.create(TaskCreate(title="draft report"))
    assert created.user_id == alice.id

    page = await as_alice.list({}, PageRequest(page=1))
    assert [t.id for t in page.items] == [created.id]

    with pytest.raises(ResourceNotFoundException):
        await as_bob.get_by_id(created.id)

    before = await as_alice.get_by_id(created.id)
    assert before.status == "pending"
    assert derive_item_key(TASK_RECORD_TYPE, created.id) in cache.keys()

    task = await as_alice.get_for_write(created.id)
    await as_alice.update(task, {"status": "done"})

    after = await as_alice.get_by_id(created.id)
    assert after.status == "done"


async def test_second_read_is_served_from_cache(db_session, alice) -> None:
    cache = CountingCache()
    service = _service(db_session, alice, cache)
    created = await service.create(TaskCreate(title="t"))

    await service.get_by_id(created.id)
    await service.get_by_id(created.id)
    await service.list({}, PageRequest())
    await service.list({}, PageRequest())
    assert cache.computes == 2


async def test_cached_item_is_not_served_to_other_principal(db_session, alice, bob, cache) -> None:
    """The item key is shared, so ownership is re-checked on every hit."""
    created = await _service(db_session, alice, cache).create(TaskCreate(title="private"))
    await _service(db_session, alice, cache).get_by_id(created.id)
    assert derive_item_key(TASK_RECORD_TYPE, created.id) in cache.keys()

    with pytest.raises(ResourceNotFoundException):
        await _service(db_session, bob, cache).get_by_id(created.id)


async def test_missing_and_foreign_records_are_indistinguishable(db_session, alice, bob, cache) -> None:
    created = await _service(db_session, alice, cache).create(TaskCreate(title="x"))
    with pytest.raises(ResourceNotFoundException) as foreign:
        await _service(db_session, bob, cache).get_by_id(created.id)
    with pytest.raises(ResourceNotFoundException) as missing:
        await _service(db_session, bob, cache).get_by_id("does-not-exist")
    assert foreign.value.error_code == missing.value.error_code
    assert foreign.value.details.keys() == missing.value.details.keys()


async def test_id_with_key_separator_is_not_found(db_session, alice, cache) -> None:
    with pytest.raises(ResourceNotFoundException):
        await _service(db_session, alice, cache).get_by_id("a:b")
    assert cache.keys() == set()


async def test_create_invalidates_cached_list_pages(db_session, alice, cache) -> None:
    service = _service(db_session, alice, cache)
    await service.create(TaskCreate(title="first"))
    assert (await service.list({"search": "task"}, PageRequest())).total == 0
    assert (await service.list({}, PageRequest())).total == 1

    await service.create(TaskCreate(title="second task"))

    assert (await service.list({}, PageRequest())).total == 2
    filtered = await service.list({"search": "task"}, PageRequest())
    assert [t.title for t in filtered.items] == ["second task"]


async def test_delete_drops_item_and_list_entries(db_session, alice, cache) -> None:
    service = _service(db_session, alice, cache)
    created = await service.create(TaskCreate(title="temp"))
    await service.get_by_id(created.id)
    await service.list({}, PageRequest())

    await service.delete(await service.get_for_write(created.id))

    assert cache.keys() == set()
    with pytest.raises(ResourceNotFoundException):
        await service.get_by_id(created.id)
    assert (await service.list({}, PageRequest())).total == 0


async def test_list_pages_are_per_principal(db_session, alice, bob, cache) -> None:
    await _service(db_session, alice, cache).create(TaskCreate(title="alice task"))
    alice_page = await _service(db_session, alice, cache).list({}, PageRequest())
    bob_page = await _service(db_session, bob, cache).list({}, PageRequest())
    assert alice_page.total == 1
    assert bob_page.total == 0


async def test_invalidation_failure_does_not_fail_write(db_session, alice, caplog) -> None:
    cache = InvalidationDownCache()
    service = _service(db_session, alice, cache)
    with caplog.at_level("ERROR"):
        created = await service.create(TaskCreate(title="still saved"))
    assert created.id
    assert "CACHE_INVALIDATION_FAILURE" in caplog.text
    task = await service.get_for_write(created.id)
    assert task.title == "still saved"


async def test_unreachable_cache_falls_back_to_store(db_session, alice) -> None:
    service = _service(db_session, alice, UnreachableCache())
    created = await service.create(TaskCreate(title="no cache"))
    assert (await service.get_by_id(created.id)).title == "no cache"
    assert (await service.list({}, PageRequest())).total == 1


async def test_service_without_cache(db_session, alice) -> None:
    service = _service(db_session, alice, None)
    created = await service.create(TaskCreate(title="plain"))
    assert (await service.get_by_id(created.id)).id == created.id


async def test_unauthenticated_reads_raise_before_cache(db_session, cache) -> None:
    service = _service(db_session, None, cache)
    with pytest.raises(UnauthenticatedAccessException):
        await service.list({}, PageRequest())
    with pytest.raises(UnauthenticatedAccessException):
        await service.get_by_id("anything")
    assert cache.keys() == set()


async def test_unknown_filters_do_not_fragment_keys(db_session, alice, cache) -> None:
    service = _service(db_session, alice, cache)
    await service.list({}, PageRequest())
    await service.list({"search": "", "status": None, "colour": "red"}, PageRequest())
    assert len(cache.keys()) == 1


class TestValidation:
    async def test_blank_title_rejected(self, db_session, alice, cache) -> None:
        with pytest.raises(ValidationException):
            await _service(db_session, alice, cache).create(TaskCreate(title="   "))

    async def test_invalid_status_rejected(self, db_session, alice, cache) -> None:
        service = _service(db_session, alice, cache)
        with pytest.raises(ValidationException, match="status"):
            await service.create(TaskCreate(title="t", status="archived"))
        with pytest.raises(ValidationException):
            await service.list({"status": "archived"}, PageRequest())

    async def test_update_strips_title(self, db_session, alice, cache) -> None:
        service = _service(db_session, alice, cache)
        created = await service.create(TaskCreate(title="t"))
        updated = await service.update(await service.get_for_write(created.id), {"title": "  new  "})
        assert updated.title == "new"
