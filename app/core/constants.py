"""Core constants: cache key structure and shared literal values.

Single source of truth for cache key and tag layout (DRY). Used by the
key/tag deriver and the cache backends.
"""

# Delimiter for composite keys and item tags
CACHE_KEY_SEP = ":"

# Key markers: <record_type>:list:<digest> and <record_type>:item:<id>
CACHE_MARKER_LIST = "list"
CACHE_MARKER_ITEM = "item"

# Redis set holding the member keys of one tag: tag:<tag>
CACHE_PREFIX_TAG = "tag"

# Applied uniformly to every cached read; invalidation is the primary mechanism.
DEFAULT_CACHE_TTL = 3600

# Ownership column used when a record type does not declare its own.
DEFAULT_OWNER_FIELD = "user_id"

DEFAULT_PAGE_SIZE = 15
MAX_PAGE_SIZE = 100
