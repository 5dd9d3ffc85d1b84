"""Tests for cache key and tag derivation."""

import itertools

import pytest

from app.application.dtos.pagination import PageRequest
from app.application.services.cache_keys import (
    collection_tag,
    derive_item_key,
    derive_list_key,
    derive_tags,
    item_tag,
)
from app.domain.record_type import RecordType

TASK = RecordType(name="task", collection="tasks")


def test_list_key_ignores_filter_order() -> None:
    """Permutations of the same filter pairs yield one key."""
    pairs = [("status", "done"), ("search", "report"), ("priority", 3)]
    keys = {
        derive_list_key(TASK, dict(perm), PageRequest(page=2, page_size=10), "p1")
        for perm in itertools.permutations(pairs)
    }
    assert len(keys) == 1


def test_list_key_differs_per_principal() -> None:
    """Identical filters and page for two principals never share a key."""
    page = PageRequest()
    assert derive_list_key(TASK, {"status": "done"}, page, "p1") != derive_list_key(
        TASK, {"status": "done"}, page, "p2"
    )


def test_list_key_differs_per_page_and_filters() -> None:
    base = derive_list_key(TASK, {}, PageRequest(page=1), "p1")
    assert base != derive_list_key(TASK, {}, PageRequest(page=2), "p1")
    assert base != derive_list_key(TASK, {}, PageRequest(page=1, page_size=5), "p1")
    assert base != derive_list_key(TASK, {"status": "done"}, PageRequest(page=1), "p1")


def test_list_key_format() -> None:
    key = derive_list_key(TASK, {}, PageRequest(), "p1")
    prefix, marker, digest = key.split(":")
    assert (prefix, marker) == ("task", "list")
    assert len(digest) == 64


def test_list_key_requires_principal() -> None:
    with pytest.raises(ValueError, match="principal_id"):
        derive_list_key(TASK, {}, PageRequest(), "")


def test_list_key_accepts_principal_with_separator() -> None:
    """Principal ids are hashed, so provider-style ids with ':' are valid."""
    key = derive_list_key(TASK, {}, PageRequest(), "google-oauth2:1234")
    assert key.count(":") == 2
    assert key != derive_list_key(TASK, {}, PageRequest(), "google-oauth2")


def test_item_key_and_tags() -> None:
    assert derive_item_key(TASK, "abc") == "task:item:abc"
    assert collection_tag(TASK) == "tasks"
    assert item_tag(TASK, "abc") == "task:abc"
    assert derive_tags(TASK, "abc") == frozenset({"tasks", "task:abc"})


def test_item_id_with_separator_rejected() -> None:
    with pytest.raises(ValueError, match="separator"):
        derive_item_key(TASK, "a:b")


class TestRecordType:
    """RecordType declarations are validated on construction."""

    def test_default_owner_field(self) -> None:
        assert TASK.owner_field == "user_id"

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError, match="name"):
            RecordType(name="", collection="tasks")

    def test_separator_rejected(self) -> None:
        with pytest.raises(ValueError, match="must not contain"):
            RecordType(name="task:x", collection="tasks")

    def test_collection_must_differ_from_name(self) -> None:
        with pytest.raises(ValueError, match="differ"):
            RecordType(name="task", collection="task")
