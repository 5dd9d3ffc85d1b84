"""Record type declarations.

Each persisted record type declares, statically, the name used in cache keys
and item tags, its collection tag, and the column that holds the owner id.
Declarations are validated when the ORM model is registered, not per query.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.core.constants import CACHE_KEY_SEP, DEFAULT_OWNER_FIELD


@dataclass(frozen=True)
class RecordType:
    """Static declaration of a record type.

    Attributes:
        name: Singular type name (e.g. 'task'); prefix of keys and item tags.
        collection: Collection tag shared by every list query of this type.
        owner_field: Column holding the owning principal's id.
    """

    name: str
    collection: str
    owner_field: str = DEFAULT_OWNER_FIELD

    def __post_init__(self) -> None:
        for value, label in (
            (self.name, "name"),
            (self.collection, "collection"),
            (self.owner_field, "owner_field"),
        ):
            if not value:
                raise ValueError(f"RecordType.{label} must be a non-empty string")
        if CACHE_KEY_SEP in self.name or CACHE_KEY_SEP in self.collection:
            raise ValueError(
                f"RecordType name and collection must not contain {CACHE_KEY_SEP!r}"
            )
        if self.name == self.collection:
            raise ValueError("RecordType collection tag must differ from its name")
