"""Query filtering utilities for SQLAlchemy.

These filters work directly with SQLAlchemy statements without hiding the
query. They're utility helpers, not an abstraction layer.

Usage:
    from sqlalchemy import select
    from catalog_pager.core.database.filters import SearchFilter, CollectionFilter

    stmt = select(CatalogItem)
    stmt = SearchFilter(CatalogItem.name, "home").apply(stmt)
    stmt = CollectionFilter(CatalogItem.id, [1, 2, 3]).apply(stmt)

    result = await session.execute(stmt)
    items = result.scalars().all()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, String, false, func

if TYPE_CHECKING:
    from sqlalchemy.orm import InstrumentedAttribute


class StatementFilter(ABC):
    """Base class for statement filters.

    All filters implement `apply()` which modifies a SQLAlchemy statement.
    """

    @abstractmethod
    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply filter to statement.

        Args:
            statement: SQLAlchemy select statement

        Returns:
            Modified select statement
        """
        ...


class SearchFilter(StatementFilter):
    """Case-insensitive substring search using LIKE.

    LIKE wildcards inside the search term are escaped, so ``"50%"`` matches
    the literal text rather than everything starting with ``50``.

    Example:
        stmt = SearchFilter(CatalogItem.name, "home").apply(stmt)

        # Generates: WHERE lower(name) LIKE '%' || 'home' || '%' ESCAPE '/'
    """

    def __init__(self, field: InstrumentedAttribute[Any], value: str | None):
        """Initialize search filter.

        Args:
            field: Text column to search
            value: Search term; empty means no constraint
        """
        self.field = field
        self.value = value

    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply search filter to statement."""
        if not self.value:
            return statement
        return statement.where(
            func.lower(self.field, type_=String).contains(self.value.lower(), autoescape=True)
        )


class EqualityFilter(StatementFilter):
    """Single column equality (WHERE column = value).

    A ``None`` value means "no constraint", not ``IS NULL``.

    Example:
        stmt = EqualityFilter(CatalogItem.style_id, 5).apply(stmt)
        # WHERE catalog_items.style_id = 5
    """

    def __init__(self, field: InstrumentedAttribute[Any], value: Any):
        """Initialize equality filter.

        Args:
            field: Field to compare
            value: Value to match, or None to skip the filter
        """
        self.field = field
        self.value = value

    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply equality filter to statement."""
        if self.value is None:
            return statement
        return statement.where(self.field == self.value)


class CollectionFilter(StatementFilter):
    """Filter by collection (WHERE ... IN).

    Example:
        stmt = CollectionFilter(CatalogItem.id, [1, 2, 3]).apply(stmt)
        # WHERE catalog_items.id IN (1, 2, 3)
    """

    def __init__(self, field: InstrumentedAttribute[Any], values: Sequence[Any]):
        """Initialize collection filter.

        Args:
            field: Field to filter
            values: Collection of values to match; empty matches nothing
        """
        self.field = field
        self.values = list(values)

    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply collection filter to statement."""
        if not self.values:
            return statement.where(false())
        return statement.where(self.field.in_(self.values))


class FilterGroup(StatementFilter):
    """Combine multiple filters with AND logic.

    Filters are applied one after another; SQLAlchemy joins successive
    ``where()`` calls with AND.

    Example:
        filters = FilterGroup([
            SearchFilter(CatalogItem.name, "home"),
            CollectionFilter(CatalogItem.set_id, [1, 2]),
        ])
        stmt = filters.apply(stmt)
    """

    def __init__(self, filters: Sequence[StatementFilter]):
        """Initialize filter group.

        Args:
            filters: List of filters to combine
        """
        self.filters = list(filters)

    def __len__(self) -> int:
        return len(self.filters)

    def __iter__(self):
        return iter(self.filters)

    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply all filters to statement."""
        for filter_obj in self.filters:
            statement = filter_obj.apply(statement)
        return statement


__all__ = [
    "CollectionFilter",
    "EqualityFilter",
    "FilterGroup",
    "SearchFilter",
    "StatementFilter",
]
