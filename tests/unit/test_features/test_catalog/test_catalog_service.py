"""Tests for CatalogService."""
from __future__ import annotations

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from catalog_pager.core.exceptions import InvalidCursorException, ValidationException
from catalog_pager.features.catalog.schemas import SearchParams
from catalog_pager.features.catalog.service import CatalogService


def _names(page) -> list[str]:
    return [item.name for item in page.results]


@pytest.fixture
def service(db_session) -> CatalogService:
    return CatalogService(db_session)


@pytest.mark.unit
class TestCursorPaginate:
    """CatalogService.cursor_paginate."""

    async def test_newest_first_pages(self, service, make_items):
        """Ten items paged three at a time, newest first."""
        await make_items(10)

        first = await service.cursor_paginate(limit=3)
        second = await service.cursor_paginate(cursor=first.page_info.end_cursor, limit=3)

        assert _names(first) == ["Page Icon 9", "Page Icon 8", "Page Icon 7"]
        assert first.page_info.has_next_page is True
        assert _names(second) == ["Page Icon 6", "Page Icon 5", "Page Icon 4"]

    async def test_free_filter(self, service, make_items):
        """Only free items are listed with price=free."""
        await make_items(4, price=lambda i: Decimal("0") if i < 2 else Decimal("9"))

        page = await service.cursor_paginate({"price": "free"}, limit=10)

        assert _names(page) == ["Page Icon 1", "Page Icon 0"]
        assert all(item.is_free for item in page.results)

    async def test_invalid_cursor(self, service, make_items):
        """A made-up token is rejected."""
        await make_items(2)

        with pytest.raises(InvalidCursorException) as exc_info:
            await service.cursor_paginate(cursor="not-a-real-token", limit=3)

        assert exc_info.value.status_code == 400

    async def test_empty_cursor_starts_from_beginning(self, service, make_items):
        """An empty string cursor is treated as no cursor."""
        await make_items(3)

        page = await service.cursor_paginate(cursor="", limit=2)

        assert _names(page) == ["Page Icon 2", "Page Icon 1"]
        assert page.page_info.has_previous_page is False

    async def test_limit_one(self, service, make_items):
        """limit=1 returns a single item and a next page."""
        await make_items(3)

        page = await service.cursor_paginate(limit=1)

        assert _names(page) == ["Page Icon 2"]
        assert page.page_info.has_next_page is True

    async def test_limit_capped_at_maximum(self, service, make_items):
        """A limit above the maximum returns a full page of 100."""
        await make_items(101)

        page = await service.cursor_paginate(limit=500)

        assert len(page.results) == 100
        assert page.page_info.has_next_page is True

    async def test_limit_follows_settings(self, db_session, make_items, monkeypatch):
        """The maximum page size comes from PAGINATION_MAX_LIMIT."""
        monkeypatch.setenv("PAGINATION_MAX_LIMIT", "2")
        monkeypatch.setenv("PAGINATION_DEFAULT_LIMIT", "2")
        await make_items(5)
        service = CatalogService(db_session)

        page = await service.cursor_paginate(limit=50)

        assert len(page.results) == 2

    @pytest.mark.parametrize("limit", [0, -5, "abc"])
    async def test_invalid_limit(self, service, limit):
        """Non-positive or non-numeric limits are rejected."""
        with pytest.raises(ValidationException):
            await service.cursor_paginate(limit=limit)

    async def test_unknown_facet(self, service):
        """Unknown facet keys are rejected."""
        with pytest.raises(ValidationException) as exc_info:
            await service.cursor_paginate({"colour": "red"})

        assert exc_info.value.extra == {"facets": ["colour"]}

    async def test_repeated_calls_are_identical(self, service, make_items):
        """The same request twice returns the same page and cursors."""
        await make_items(5)

        first = await service.cursor_paginate({"price": "free"}, limit=2)
        again = await service.cursor_paginate({"price": "free"}, limit=2)

        assert first == again

    async def test_page_serializes_to_wire_shape(self, service, make_items):
        """Pages dump to camelCase JSON."""
        await make_items(1)

        data = (await service.cursor_paginate(limit=5)).model_dump(mode="json", by_alias=True)

        assert set(data) == {"results", "pageInfo"}
        assert data["pageInfo"]["hasNextPage"] is False
        assert data["results"][0]["name"] == "Page Icon 0"
        assert "createdAt" in data["results"][0]

    async def test_session_override(self, make_items, db_session):
        """A per-call session replaces the service session."""
        await make_items(2)
        service = CatalogService(AsyncMock())

        page = await service.cursor_paginate(limit=5, session=db_session)

        assert len(page.results) == 2


@pytest.mark.unit
class TestSearch:
    """CatalogService.search sort mapping."""

    async def test_newest(self, service, make_items):
        """newest orders by creation time, newest first."""
        await make_items(3)

        page = await service.search(sort="newest")

        assert _names(page) == ["Page Icon 2", "Page Icon 1", "Page Icon 0"]

    async def test_bestseller(self, service, db_session, make_items):
        """bestseller orders by popularity, highest first."""
        items = await make_items(3)
        items[0].popularity = 100
        await db_session.flush()

        page = await service.search(sort="bestseller")

        assert _names(page) == ["Page Icon 0", "Page Icon 2", "Page Icon 1"]

    async def test_relevance_keeps_ranked_order(self, service, make_items):
        """relevance returns ids in the given order, across pages."""
        items = await make_items(10)
        ranked = [items[7].id, items[3].id, items[9].id, items[1].id]

        first = await service.search(ids=ranked, sort="relevance", limit=2)
        second = await service.search(
            ids=ranked, sort="relevance", limit=2, cursor=first.page_info.end_cursor
        )

        assert _names(first) == ["Page Icon 7", "Page Icon 3"]
        assert _names(second) == ["Page Icon 9", "Page Icon 1"]
        assert second.page_info.has_next_page is False

    async def test_relevance_with_empty_ids(self, service, make_items):
        """An empty ranked list yields an empty page."""
        await make_items(3)

        page = await service.search(ids=[], sort="relevance")

        assert page.results == []
        assert page.page_info.has_next_page is False

    async def test_relevance_without_ids_falls_back_to_newest(self, service, make_items):
        """relevance without ids behaves like newest."""
        await make_items(3)

        page = await service.search(sort="relevance")

        assert _names(page) == ["Page Icon 2", "Page Icon 1", "Page Icon 0"]

    async def test_ids_allow_list_for_newest(self, service, make_items):
        """For field orderings ids only restricts the result set."""
        items = await make_items(4)

        page = await service.search(ids=[items[0].id, items[2].id], sort="newest")

        assert _names(page) == ["Page Icon 2", "Page Icon 0"]

    async def test_unknown_sort(self, service):
        """Unknown sort names are rejected."""
        with pytest.raises(ValidationException) as exc_info:
            await service.search(sort="cheapest")

        assert exc_info.value.extra["field"] == "sort"

    async def test_bad_cursor_reported_before_sort(self, service):
        """A made-up token is rejected even when the sort is unknown too."""
        with pytest.raises(InvalidCursorException):
            await service.search(sort="cheapest", cursor="not-a-real-token", limit=0)

    async def test_search_term_and_price(self, service, make_items):
        """Facet keywords are forwarded to the filters."""
        await make_items(2, prefix="Arrow", price=Decimal("0"))
        await make_items(2, prefix="Arrow Pro", price=Decimal("5"))
        await make_items(2, prefix="Home")

        page = await service.search(search_term="arrow", price="premium")

        assert sorted(_names(page)) == ["Arrow Pro 0", "Arrow Pro 1"]

    async def test_search_params_object(self, service, make_items):
        """A SearchParams object can carry every argument."""
        items = await make_items(4)
        params = SearchParams.model_validate(
            {"ids": [items[3].id, items[0].id], "sort": "relevance", "limit": 1}
        )

        page = await service.search(params)

        assert _names(page) == ["Page Icon 3"]
        assert page.page_info.has_next_page is True
