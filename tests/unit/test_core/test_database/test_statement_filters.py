"""Tests for SQLAlchemy statement filters."""
from __future__ import annotations

import pytest
from sqlalchemy import select
from sqlalchemy.dialects import sqlite

from catalog_pager.core.database.filters import (
    CollectionFilter,
    EqualityFilter,
    FilterGroup,
    SearchFilter,
)
from catalog_pager.features.catalog.models import CatalogItem


def _sql(stmt) -> str:
    return str(stmt.compile(dialect=sqlite.dialect()))


@pytest.mark.unit
class TestSearchFilter:
    """Tests for SearchFilter."""

    def test_case_insensitive_contains(self):
        """Search lowers both sides and uses LIKE with an escape character."""
        stmt = SearchFilter(CatalogItem.name, "Home").apply(select(CatalogItem))

        sql = _sql(stmt)
        assert "lower(catalog_items.name) LIKE" in sql
        assert "ESCAPE '/'" in sql

    def test_wildcards_are_escaped(self):
        """LIKE wildcards in the term match literally."""
        stmt = SearchFilter(CatalogItem.name, "50%_off").apply(select(CatalogItem))

        params = stmt.compile(dialect=sqlite.dialect()).params
        assert "50/%/_off" in params.values()

    def test_blank_value_is_noop(self):
        """An empty term adds no WHERE clause."""
        stmt = SearchFilter(CatalogItem.name, "").apply(select(CatalogItem))

        assert "WHERE" not in _sql(stmt)


@pytest.mark.unit
class TestEqualityFilter:
    """Tests for EqualityFilter."""

    def test_equality(self):
        """A value adds column = value."""
        stmt = EqualityFilter(CatalogItem.style_id, 5).apply(select(CatalogItem))

        assert "catalog_items.style_id = ?" in _sql(stmt)

    def test_none_is_noop(self):
        """None means no constraint, not IS NULL."""
        stmt = EqualityFilter(CatalogItem.style_id, None).apply(select(CatalogItem))

        assert "WHERE" not in _sql(stmt)


@pytest.mark.unit
class TestCollectionFilter:
    """Tests for CollectionFilter."""

    def test_in_clause(self):
        """Values become an IN clause."""
        stmt = CollectionFilter(CatalogItem.id, [1, 2, 3]).apply(select(CatalogItem))

        assert "catalog_items.id IN" in _sql(stmt)

    def test_empty_matches_nothing(self):
        """An explicitly empty collection matches no rows."""
        stmt = CollectionFilter(CatalogItem.id, []).apply(select(CatalogItem))

        assert "WHERE 0 = 1" in _sql(stmt) or "WHERE false" in _sql(stmt).lower()


@pytest.mark.unit
class TestFilterGroup:
    """Tests for FilterGroup."""

    def test_filters_are_anded(self):
        """Every filter of the group ends up in the WHERE clause."""
        group = FilterGroup(
            [
                EqualityFilter(CatalogItem.style_id, 1),
                EqualityFilter(CatalogItem.user_id, 2),
            ]
        )

        sql = _sql(group.apply(select(CatalogItem)))

        assert "catalog_items.style_id = ?" in sql
        assert "catalog_items.user_id = ?" in sql
        assert " AND " in sql
        assert len(group) == 2
