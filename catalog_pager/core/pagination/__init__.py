"""Keyset (cursor) pagination.

Cursor pagination is efficient for large datasets and stays consistent
when rows are inserted or deleted while a client is paging.

Usage:
    from catalog_pager.core.pagination import FieldSort, KeysetPaginator

    page = await KeysetPaginator().paginate(
        session,
        select(CatalogItem),
        FieldSort("createdAt", CatalogItem.created_at, CatalogItem.id, "desc"),
        cursor=cursor,
        limit=20,
    )
"""

from __future__ import annotations

from catalog_pager.core.pagination.cursor import (
    CursorCodec,
    CursorMode,
    CursorPayload,
    FieldCursor,
    RelevanceCursor,
)
from catalog_pager.core.pagination.engine import KeysetPaginator, normalize_limit, read_cursor
from catalog_pager.core.pagination.schemas import CursorPage, PageInfo
from catalog_pager.core.pagination.sorting import (
    FieldSort,
    RelevanceSort,
    SortDirection,
    SortStrategy,
)

__all__ = [
    "CursorCodec",
    "CursorMode",
    "CursorPage",
    "CursorPayload",
    "FieldCursor",
    "FieldSort",
    "KeysetPaginator",
    "PageInfo",
    "RelevanceCursor",
    "RelevanceSort",
    "SortDirection",
    "SortStrategy",
    "normalize_limit",
    "read_cursor",
]
