"""Tests for pagination DTOs."""

import pytest

from app.application.dtos.pagination import Page, PageRequest
from app.core.constants import MAX_PAGE_SIZE
from app.domain.exceptions import ValidationException


class TestPageRequest:
    def test_offset(self) -> None:
        assert PageRequest(page=3, page_size=10).offset == 20

    def test_page_must_be_positive(self) -> None:
        with pytest.raises(ValidationException, match="page") as exc_info:
            PageRequest(page=0)
        assert exc_info.value.details == {"field": "page"}

    def test_page_size_bounds(self) -> None:
        with pytest.raises(ValidationException, match="page_size"):
            PageRequest(page_size=0)
        with pytest.raises(ValidationException, match="page_size"):
            PageRequest(page_size=MAX_PAGE_SIZE + 1)

    def test_configured_max_page_size(self) -> None:
        """A larger configured bound admits page sizes above the default constant."""
        request = PageRequest(page_size=150, max_page_size=200)
        assert request.page_size == 150
        with pytest.raises(ValidationException, match="between 1 and 200"):
            PageRequest(page_size=201, max_page_size=200)

    def test_max_page_size_is_not_part_of_equality(self) -> None:
        assert PageRequest(page_size=10, max_page_size=50) == PageRequest(page_size=10)


def test_last_page() -> None:
    assert Page(items=[], page=1, page_size=15, total=0).last_page == 1
    assert Page(items=[], page=1, page_size=15, total=15).last_page == 1
    assert Page(items=[], page=1, page_size=15, total=16).last_page == 2
