"""Pagination DTOs: page request and page of results (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from math import ceil
from typing import Generic, TypeVar

from app.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.domain.exceptions import ValidationException


@dataclass(frozen=True)
class PageRequest:
    """1-based page number and page size. Part of every list cache key.

    max_page_size is the configured upper bound (Settings.max_page_size); it
    only validates page_size and is not part of the cache key.
    """

    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    max_page_size: int = field(default=MAX_PAGE_SIZE, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationException("page must be >= 1", field="page")
        if not 1 <= self.page_size <= self.max_page_size:
            raise ValidationException(
                f"page_size must be between 1 and {self.max_page_size}", field="page_size"
            )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


ItemType = TypeVar("ItemType")


@dataclass(frozen=True)
class Page(Generic[ItemType]):
    """One page of results plus the counts needed for pagination meta."""

    items: list[ItemType] = field(default_factory=list)
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    total: int = 0

    @property
    def last_page(self) -> int:
        return max(1, ceil(self.total / self.page_size))
