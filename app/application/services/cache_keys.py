"""Cache key and tag derivation. Single place for key format (DRY).

Pure, deterministic functions. List keys hash a canonical serialization of
filters, pagination and principal id; item keys and tags use the record type
name and record id verbatim, so those components must not contain
CACHE_KEY_SEP.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from typing import Any

from app.application.dtos.pagination import PageRequest
from app.core.constants import CACHE_KEY_SEP, CACHE_MARKER_ITEM, CACHE_MARKER_LIST
from app.domain.record_type import RecordType


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the cache key separator.

    Args:
        value: String component used in a cache key.
        name: Name of the component (for error message).

    Raises:
        ValueError: If value is empty or contains CACHE_KEY_SEP.
    """
    if not value:
        raise ValueError(f"Cache key component {name!r} must be non-empty")
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def canonical_filters(filters: Mapping[str, Any]) -> str:
    """Serialize filters with sorted names so insertion order never matters."""
    return json.dumps(dict(filters), sort_keys=True, separators=(",", ":"), default=str)


def derive_list_key(
    record_type: RecordType,
    filters: Mapping[str, Any],
    page_request: PageRequest,
    principal_id: str,
) -> str:
    """Cache key for one page of a scoped, filtered list query.

    The principal id is part of the hashed payload: two principals never
    share a list key, even for identical filters and pagination. Because it
    is hashed, any non-empty id is accepted (e.g. "google-oauth2:1234").
    """
    if not principal_id:
        raise ValueError("Cache key component 'principal_id' must be non-empty")
    payload = {
        "filters": dict(filters),
        "page": page_request.page,
        "page_size": page_request.page_size,
        "principal": principal_id,
    }
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return f"{record_type.name}{CACHE_KEY_SEP}{CACHE_MARKER_LIST}{CACHE_KEY_SEP}{digest}"


def derive_item_key(record_type: RecordType, record_id: str) -> str:
    """Cache key for one record. Not tenant-qualified: ownership is checked on read."""
    _validate_key_component(record_id, "record_id")
    return f"{record_type.name}{CACHE_KEY_SEP}{CACHE_MARKER_ITEM}{CACHE_KEY_SEP}{record_id}"


def collection_tag(record_type: RecordType) -> str:
    """Tag shared by every cached list page (and item) of a record type."""
    return record_type.collection


def item_tag(record_type: RecordType, record_id: str) -> str:
    """Tag unique to one record: <record_type>:<id>."""
    _validate_key_component(record_id, "record_id")
    return f"{record_type.name}{CACHE_KEY_SEP}{record_id}"


def derive_tags(record_type: RecordType, record_id: str) -> frozenset[str]:
    """Tags dropped when a record changes: its collection tag and its item tag."""
    return frozenset({collection_tag(record_type), item_tag(record_type, record_id)})
