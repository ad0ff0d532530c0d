"""Unit tests for page windows and pagination metadata."""

from __future__ import annotations

import pytest

from mp_docstore.application.pagination import (
    PagedResult,
    PageRequest,
    PaginationResult,
    resolve_pagination,
)


# ---------------------------------------------------------------------------
# PageRequest
# ---------------------------------------------------------------------------


class TestPageRequest:
    def test_defaults(self) -> None:
        pr = PageRequest()
        assert pr.page == 1
        assert pr.size == 10
        assert pr.skip == 0

    def test_of(self) -> None:
        pr = PageRequest.of(3, 10)
        assert pr.skip == 20
        assert pr.limit == 10
        assert pr.page == 3

    def test_page_zero_raises(self) -> None:
        with pytest.raises(ValueError):
            PageRequest.of(0, 10)

    def test_negative_skip_raises(self) -> None:
        with pytest.raises(ValueError):
            PageRequest(skip=-1)

    def test_zero_limit_raises(self) -> None:
        with pytest.raises(ValueError):
            PageRequest(limit=0)

    def test_from_query_strings(self) -> None:
        pr = PageRequest.from_query("2", "25")
        assert (pr.skip, pr.limit) == (25, 25)

    def test_from_query_leading_integer(self) -> None:
        pr = PageRequest.from_query("3abc", "10px")
        assert (pr.page, pr.size) == (3, 10)

    @pytest.mark.parametrize("page", [None, "", "abc", "0", "-2", 0, True])
    def test_unusable_page_falls_back(self, page: object) -> None:
        assert PageRequest.from_query(page, "10").page == 1  # type: ignore[arg-type]

    @pytest.mark.parametrize("length", [None, "", "x", "0", -5])
    def test_unusable_length_falls_back(self, length: object) -> None:
        assert PageRequest.from_query("1", length, default_size=15).size == 15  # type: ignore[arg-type]

    def test_max_size_clamps(self) -> None:
        assert PageRequest.from_query("1", "5000", max_size=1000).size == 1000


# ---------------------------------------------------------------------------
# resolve_pagination
# ---------------------------------------------------------------------------


class TestResolvePagination:
    def test_partial_last_page(self) -> None:
        result = resolve_pagination(25, PageRequest.of(2, 10))
        assert result == PaginationResult(total_items=25, total_pages=3, current_page=2, page_size=10)

    def test_exact_division(self) -> None:
        assert resolve_pagination(20, PageRequest.of(1, 10)).total_pages == 2

    def test_empty_total(self) -> None:
        result = resolve_pagination(0, PageRequest.of(1, 10))
        assert result.total_pages == 0
        assert result.current_page == 1
        assert not result.has_next

    def test_page_past_the_end(self) -> None:
        result = resolve_pagination(5, PageRequest.of(4, 10))
        assert result.current_page == 4
        assert not result.has_next
        assert result.has_previous

    def test_to_dict_is_camel_case(self) -> None:
        assert resolve_pagination(25, PageRequest.of(2, 10)).to_dict() == {
            "totalItems": 25,
            "totalPages": 3,
            "currentPage": 2,
            "pageSize": 10,
        }


# ---------------------------------------------------------------------------
# PagedResult
# ---------------------------------------------------------------------------


class TestPagedResult:
    def test_map_keeps_pagination(self) -> None:
        meta = resolve_pagination(2, PageRequest())
        page = PagedResult(data=[1, 2], pagination=meta).map(lambda x: x * 10)
        assert page.data == [10, 20]
        assert page.pagination is meta

    def test_to_dict(self) -> None:
        page = PagedResult(data=[{"a": 1}], pagination=resolve_pagination(1, PageRequest()))
        assert page.to_dict()["data"] == [{"a": 1}]
        assert page.to_dict()["pagination"]["totalItems"] == 1
