"""Repository for the catalog feature."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from sqlalchemy import select

from catalog_pager.core.database.repository import BaseRepository
from catalog_pager.core.exceptions import ValidationException
from catalog_pager.core.pagination import FieldSort, KeysetPaginator, RelevanceSort, read_cursor
from catalog_pager.features.catalog.facets import CatalogFacets, compile_facets
from catalog_pager.features.catalog.models import CatalogItem
from catalog_pager.features.catalog.schemas import CatalogItemRead

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute

    from catalog_pager.core.pagination import CursorPage, SortStrategy

RELEVANCE = "relevance"

# Public sort names -> columns. Both spellings of created_at are accepted.
SORTABLE_FIELDS: dict[str, InstrumentedAttribute[Any]] = {
    "createdAt": CatalogItem.created_at,
    "created_at": CatalogItem.created_at,
    "popularity": CatalogItem.popularity,
}

SORT_ORDERS = ("asc", "desc")


class CatalogItemRepository(BaseRepository[CatalogItem]):
    """Repository for CatalogItem model.

    Inherits from BaseRepository:
        - get(session, id) -> CatalogItem | None
        - create(session, instance) -> CatalogItem
        - create_many(session, instances) -> Sequence[CatalogItem]

    Feature-specific methods below.
    """

    def __init__(self, paginator: KeysetPaginator | None = None) -> None:
        """Initialize with CatalogItem model.

        Args:
            paginator: Page assembler (optional, uses default if not provided)
        """
        super().__init__(CatalogItem)
        self.paginator = paginator or KeysetPaginator()

    async def cursor_paginate(
        self,
        session: AsyncSession,
        filters: Mapping[str, Any] | CatalogFacets | None = None,
        cursor: str | None = None,
        limit: Any = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
        *,
        include_total_count: bool = False,
        factory: Callable[[Any], Any] | None = CatalogItemRead.model_validate,
    ) -> CursorPage[Any]:
        """Fetch one page of catalog items.

        Args:
            session: Database session
            filters: Facet map (see ``CatalogFacets``)
            cursor: ``end_cursor`` of the previous page, or None for the first page
            limit: Page size; defaults to the configured default
            sort_by: ``createdAt``, ``popularity`` or ``relevance``
            sort_order: ``asc`` or ``desc``; ignored for ``relevance``
            include_total_count: Also count all matching items
            factory: Row wrapper; None returns ORM instances

        Returns:
            Page of items

        Raises:
            ValidationException: On bad sort arguments, facets or limit
            InvalidCursorException: If the cursor does not belong to this query
        """
        # A bad token is reported as such whatever else is wrong
        payload = read_cursor(cursor)

        relevance = sort_by == RELEVANCE
        facets, filter_group = compile_facets(filters, restrict_ids=not relevance)
        strategy = self._build_strategy(facets, sort_by, sort_order)

        statement = filter_group.apply(select(CatalogItem))

        self._lazy.debug(
            lambda: f"db.cursor_paginate(sort_by={sort_by!r}, sort_order={sort_order!r}, "
            f"filters={len(filter_group)}, cursor={'yes' if payload else 'no'})"
        )
        return await self.paginator.paginate(
            session,
            statement,
            strategy,
            cursor=payload,
            limit=limit,
            fingerprint=facets.fingerprint(),
            include_total_count=include_total_count,
            factory=factory,
        )

    @staticmethod
    def _build_strategy(facets: CatalogFacets, sort_by: str, sort_order: str) -> SortStrategy:
        if sort_by == RELEVANCE:
            if facets.ids_order is None:
                raise ValidationException(
                    detail="Relevance ordering requires the idsOrder facet",
                    type="missing-relevance-order",
                    extra={"field": "sort_by", "value": sort_by},
                )
            return RelevanceSort(facets.ids_order, CatalogItem.id)

        column = SORTABLE_FIELDS.get(sort_by)
        if column is None:
            raise ValidationException(
                detail=f"Unknown sort field: {sort_by!r}",
                extra={"field": "sort_by", "allowed": [*SORTABLE_FIELDS, RELEVANCE]},
            )
        if sort_order not in SORT_ORDERS:
            raise ValidationException(
                detail=f"Unknown sort order: {sort_order!r}",
                extra={"field": "sort_order", "allowed": list(SORT_ORDERS)},
            )
        # One cursor name per column, whichever spelling was requested
        name = "createdAt" if column is CatalogItem.created_at else sort_by
        return FieldSort(name, column, CatalogItem.id, sort_order)  # type: ignore[arg-type]


@lru_cache(maxsize=1)
def get_catalog_item_repository() -> CatalogItemRepository:
    """Get the shared CatalogItemRepository instance."""
    return CatalogItemRepository()


__all__ = [
    "SORTABLE_FIELDS",
    "CatalogItemRepository",
    "get_catalog_item_repository",
]
