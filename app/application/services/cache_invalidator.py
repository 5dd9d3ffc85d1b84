"""Post-commit cache invalidation for scoped records (ICacheInvalidator).

Repositories call this after a write has committed and before the write
returns, so any read that starts afterwards misses and rebuilds. A cache
failure here never fails the write: it is logged as a
CacheInvalidationException and stale reads are bounded by the entry TTL.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from app.application.interfaces.services import ITaggedCache
from app.application.services.cache_keys import collection_tag, derive_tags
from app.domain.exceptions import CacheInvalidationException, CacheUnavailableException
from app.domain.record_type import RecordType

logger = logging.getLogger(__name__)


class CacheInvalidator:
    """Drops cache tags after committed create/update/delete."""

    def __init__(self, cache: ITaggedCache | None) -> None:
        self.cache = cache

    async def record_created(self, record_type: RecordType) -> bool:
        """New record: only list pages can be affected."""
        return await self._invalidate([collection_tag(record_type)])

    async def record_changed(self, record_type: RecordType, record_id: str) -> bool:
        """Updated or deleted record: its item entry and every list page."""
        return await self._invalidate(derive_tags(record_type, record_id))

    async def _invalidate(self, tags: Iterable[str]) -> bool:
        tag_list = sorted(tags)
        if self.cache is None:
            return True
        try:
            await self.cache.invalidate_tags(tag_list)
        except CacheUnavailableException as e:
            failure = CacheInvalidationException(tag_list, str(e.details.get("reason", e)))
            logger.error(
                "%s: %s (%s)",
                failure.error_code,
                failure.message,
                failure.details["reason"],
                extra={"error_code": failure.error_code, "tags": tag_list},
            )
            return False
        return True
