"""Service layer for the catalog feature."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from catalog_pager.core.exceptions import ValidationException
from catalog_pager.core.pagination import read_cursor
from catalog_pager.features.catalog.repository import (
    CatalogItemRepository,
    get_catalog_item_repository,
)
from catalog_pager.features.catalog.schemas import SearchParams
from catalog_pager.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from catalog_pager.core.pagination import CursorPage
    from catalog_pager.features.catalog.facets import CatalogFacets
    from catalog_pager.features.catalog.schemas import CatalogItemRead


# Standard logger for INFO/WARNING/ERROR
logger = logging.getLogger(__name__)
# Lazy logger for DEBUG (zero overhead when DEBUG disabled)
lazy_logger = get_lazy_logger(__name__)

# search() sort name -> (sort_by, sort_order)
SEARCH_SORTS: dict[str, tuple[str, str]] = {
    "newest": ("createdAt", "desc"),
    "bestseller": ("popularity", "desc"),
    "relevance": ("relevance", "asc"),
}


class CatalogService:
    """Service for browsing the catalog.

    Handles:
    - Keyset pagination over filtered catalog items
    - Mapping storefront search options onto sort modes
    """

    def __init__(
        self,
        session: AsyncSession,
        repo: CatalogItemRepository | None = None,
    ) -> None:
        """Initialize the catalog service.

        Args:
            session: Database session for operations
            repo: Catalog repository (optional, uses default if not provided)
        """
        self._session = session
        self._repo = repo or get_catalog_item_repository()

    async def cursor_paginate(
        self,
        filters: Mapping[str, Any] | CatalogFacets | None = None,
        cursor: str | None = None,
        limit: Any = 20,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
        *,
        include_total_count: bool = False,
        session: AsyncSession | None = None,
    ) -> CursorPage[CatalogItemRead]:
        """Fetch one page of catalog items.

        Args:
            filters: Facet map, e.g. ``{"price": "free", "tagIds": [3]}``
            cursor: ``page_info.end_cursor`` of the previous page
            limit: Page size (1..max, larger values are capped)
            sort_by: ``createdAt``, ``popularity`` or ``relevance``
            sort_order: ``asc`` or ``desc``; ignored for ``relevance``
            include_total_count: Also count all matching items (extra query)
            session: Overrides the service session for this call

        Returns:
            Page of items with pagination metadata

        Raises:
            ValidationException: On bad limit, sort or facet arguments
            InvalidCursorException: If the cursor does not fit this request
        """
        page = await self._repo.cursor_paginate(
            session or self._session,
            filters,
            cursor,
            limit,
            sort_by,
            sort_order,
            include_total_count=include_total_count,
        )
        lazy_logger.debug(
            lambda: f"service.cursor_paginate(sort_by={sort_by!r}) -> {len(page.results)} items, "
            f"has_next_page={page.page_info.has_next_page}"
        )
        return page

    async def search(
        self,
        params: SearchParams | None = None,
        *,
        price: str = "all",
        tag_ids: Sequence[int] | None = None,
        style_id: int | None = None,
        user_id: int | None = None,
        set_id: int | None = None,
        family_id: int | None = None,
        search_term: str | None = None,
        ids: Sequence[int] | None = None,
        cursor: str | None = None,
        limit: Any = 20,
        sort: str = "newest",
        session: AsyncSession | None = None,
    ) -> CursorPage[CatalogItemRead]:
        """Storefront search.

        ``sort`` selects the ordering:

        - ``newest``: newest first; ``ids`` restricts the result set
        - ``bestseller``: most popular first; ``ids`` restricts the result set
        - ``relevance``: ``ids`` is the ranked list from the search index and
          its order is kept. Without ``ids`` this falls back to ``newest``.

        Args:
            params: All arguments as one object; keyword arguments are
                ignored when given
            session: Overrides the service session for this call

        Returns:
            Page of items with pagination metadata

        Raises:
            ValidationException: On an unknown sort or bad arguments
            InvalidCursorException: If the cursor does not fit this request
        """
        if params is not None:
            price = params.price
            tag_ids = params.tag_ids
            style_id = params.style_id
            user_id = params.user_id
            set_id = params.set_id
            family_id = params.family_id
            search_term = params.search_term
            ids = params.ids
            cursor = params.cursor
            limit = params.limit
            sort = params.sort

        read_cursor(cursor)
        if sort not in SEARCH_SORTS:
            raise ValidationException(
                detail=f"Unknown sort: {sort!r}",
                extra={"field": "sort", "allowed": list(SEARCH_SORTS)},
            )
        if sort == "relevance" and ids is None:
            logger.info("Relevance sort without ranked ids; falling back to newest")
            sort = "newest"
        sort_by, sort_order = SEARCH_SORTS[sort]

        filters: dict[str, Any] = {
            "price": price,
            "tagIds": tag_ids,
            "styleId": style_id,
            "userId": user_id,
            "setId": set_id,
            "familyId": family_id,
            "searchTerm": search_term,
        }
        if ids is not None:
            filters["idsOrder" if sort == "relevance" else "ids"] = list(ids)

        return await self.cursor_paginate(
            filters,
            cursor,
            limit,
            sort_by,
            sort_order,
            session=session,
        )


__all__ = [
    "SEARCH_SORTS",
    "CatalogService",
]
