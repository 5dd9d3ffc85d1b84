"""Cached retrieval: cache-first list and single-record reads over a scoped repository.

List pages are keyed by filters, pagination and the principal id and tagged
with the collection tag. Single records are keyed by type and id (not
principal) and tagged with both the collection and the item tag; a cached
record is only returned to the principal that owns it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from app.application.dtos.pagination import Page, PageRequest
from app.application.interfaces.repositories import IScopedRecordRepository
from app.application.interfaces.services import ITaggedCache
from app.application.services.cache_keys import (
    collection_tag,
    derive_item_key,
    derive_list_key,
    derive_tags,
)
from app.core.constants import DEFAULT_CACHE_TTL
from app.domain.exceptions import ResourceNotFoundException

logger = logging.getLogger(__name__)


ResultT = TypeVar("ResultT")


class CachedRetrievalService(Generic[ResultT]):
    """Cache-first reads for one record type, bound to one request's scope.

    The principal id used in cache keys is taken from the repository's scope,
    so the key and the miss-path query always agree on the owner.
    """

    def __init__(
        self,
        repo: IScopedRecordRepository[ResultT],
        cache: ITaggedCache | None,
        *,
        ttl: int = DEFAULT_CACHE_TTL,
    ) -> None:
        self.repo = repo
        self.cache = cache
        self.ttl = ttl

    async def list(
        self, filters: Mapping[str, Any], page_request: PageRequest
    ) -> Page[ResultT]:
        """Return one page of the principal's records matching filters."""
        record_type = self.repo.record_type
        key = derive_list_key(record_type, filters, page_request, self.repo.scope.principal_id)

        async def _load() -> dict[str, Any]:
            items, total = await self.repo.list_results(filters, page_request)
            return {
                "items": [self.repo.serialize(item) for item in items],
                "page": page_request.page,
                "page_size": page_request.page_size,
                "total": total,
            }

        if self.cache is None:
            data = await _load()
        else:
            data = await self.cache.remember(key, [collection_tag(record_type)], self.ttl, _load)
        return Page(
            items=[self.repo.deserialize(item) for item in data["items"]],
            page=data["page"],
            page_size=data["page_size"],
            total=data["total"],
        )

    async def get_by_id(self, record_id: str) -> ResultT:
        """Return the record if the principal owns it.

        Raises:
            ResourceNotFoundException: Record is absent or owned by another
                principal (the two cases are not distinguished).
            UnauthenticatedAccessException: No principal bound.
        """
        record_type = self.repo.record_type
        scope = self.repo.scope
        # Fails before touching the cache when no principal is bound.
        principal_id = scope.principal_id
        try:
            key = derive_item_key(record_type, record_id)
            tags = derive_tags(record_type, record_id)
        except ValueError:
            # Ids that cannot be encoded in a key (empty, contain ':') are never issued.
            raise ResourceNotFoundException(record_type.name, record_id) from None

        async def _load() -> dict[str, Any]:
            result = await self.repo.get_result_by_id(record_id)
            if result is None:
                raise ResourceNotFoundException(record_type.name, record_id)
            return self.repo.serialize(result)

        if self.cache is None:
            data = await _load()
        else:
            data = await self.cache.remember(key, tags, self.ttl, _load)
        if not scope.owns(data.get(record_type.owner_field)):
            logger.debug(
                "Cached %s %s not owned by principal %s", record_type.name, record_id, principal_id
            )
            raise ResourceNotFoundException(record_type.name, record_id)
        return self.repo.deserialize(data)
