"""Core database package: declarative base, repository, and statement filters.

Base Classes and Mixins:
    - Base: Declarative base with constraint naming
    - IntegerPKMixin, TimestampMixin: Column mixins
    - TimestampedBase: Integer PK + timestamps

Repository:
    - BaseRepository[T]: Persistence helpers with explicit session passing

Query Filters:
    - SearchFilter: Case-insensitive substring search
    - EqualityFilter: Single column equality
    - CollectionFilter: WHERE ... IN clauses
    - FilterGroup: AND-combine multiple filters
"""

from __future__ import annotations

from catalog_pager.core.database.base import (
    NAMING_CONVENTION,
    Base,
    IntegerPKMixin,
    TimestampedBase,
    TimestampMixin,
)
from catalog_pager.core.database.exceptions import InvalidFilterError, RepositoryError
from catalog_pager.core.database.filters import (
    CollectionFilter,
    EqualityFilter,
    FilterGroup,
    SearchFilter,
    StatementFilter,
)
from catalog_pager.core.database.repository import BaseRepository

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "BaseRepository",
    "CollectionFilter",
    "EqualityFilter",
    "FilterGroup",
    "IntegerPKMixin",
    "InvalidFilterError",
    "RepositoryError",
    "SearchFilter",
    "StatementFilter",
    "TimestampMixin",
    "TimestampedBase",
]
