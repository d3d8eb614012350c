"""Catalog filter facets and their compilation into statement filters.

A facet map is what a listing request carries, e.g.::

    {"price": "free", "tagIds": [3, 8], "searchTerm": "arrow"}

``compile_facets`` validates it into an immutable ``CatalogFacets`` and a
``FilterGroup`` of typed filters, one per facet that is present. Facets
are AND-ed; an absent facet imposes no constraint. No SQL is executed.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from sqlalchemy import select

from catalog_pager.core.database import (
    CollectionFilter,
    EqualityFilter,
    FilterGroup,
    InvalidFilterError,
    SearchFilter,
    StatementFilter,
)
from catalog_pager.core.exceptions import ValidationException
from catalog_pager.features.catalog.models import CatalogItem, IconSet, catalog_item_tags

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.orm import InstrumentedAttribute

PriceTier = Literal["all", "free", "premium"]

PRICE_TIERS: tuple[str, ...] = ("all", "free", "premium")


class PriceFilter(StatementFilter):
    """Free/premium split on a price column.

    Example:
        stmt = PriceFilter(CatalogItem.price, "free").apply(stmt)
        # WHERE catalog_items.price = 0
    """

    def __init__(self, field: InstrumentedAttribute[Any], tier: str | None):
        if tier is not None and tier not in PRICE_TIERS:
            raise InvalidFilterError(f"Unknown price tier: {tier!r}", filter_name="price")
        self.field = field
        self.tier = tier

    def apply(self, statement: Select[Any]) -> Select[Any]:
        if self.tier == "free":
            return statement.where(self.field == 0)
        if self.tier == "premium":
            return statement.where(self.field > 0)
        return statement


class TagFilter(StatementFilter):
    """Keep items linked to at least one of the given tags.

    Compiled as a correlated EXISTS so items carrying several matching tags
    are not duplicated.
    """

    def __init__(self, tag_ids: tuple[int, ...] | None):
        self.tag_ids = tag_ids or ()

    def apply(self, statement: Select[Any]) -> Select[Any]:
        if not self.tag_ids:
            return statement
        linked = (
            select(catalog_item_tags.c.item_id)
            .where(
                catalog_item_tags.c.item_id == CatalogItem.id,
                catalog_item_tags.c.tag_id.in_(self.tag_ids),
            )
            .exists()
        )
        return statement.where(linked)


class FamilyFilter(StatementFilter):
    """Keep items whose icon set belongs to a family (item -> set -> family)."""

    def __init__(self, family_id: int | None):
        self.family_id = family_id

    def apply(self, statement: Select[Any]) -> Select[Any]:
        if self.family_id is None:
            return statement
        return statement.where(CatalogItem.icon_set.has(IconSet.family_id == self.family_id))


class CatalogFacets(BaseModel):
    """Validated, immutable set of catalog filter facets.

    Accepts wire names (``tagIds``) and field names (``tag_ids``).
    ``is_active``/``is_deleted`` default to listing live items only;
    passing ``None`` explicitly lifts that constraint.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )

    price: PriceTier | None = None
    tag_ids: tuple[int, ...] | None = None
    style_id: int | None = None
    user_id: int | None = None
    set_id: int | None = None
    family_id: int | None = None
    search_term: str | None = None
    ids: tuple[int, ...] | None = None
    ids_order: tuple[int, ...] | None = None
    is_active: bool | None = True
    is_deleted: bool | None = False

    @field_validator("price")
    @classmethod
    def _all_means_unfiltered(cls, v: str | None) -> str | None:
        return None if v == "all" else v

    @field_validator("tag_ids")
    @classmethod
    def _normalize_tags(cls, v: tuple[int, ...] | None) -> tuple[int, ...] | None:
        if not v:
            return None
        return tuple(sorted(set(v)))

    @field_validator("search_term")
    @classmethod
    def _blank_term_is_absent(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    @property
    def id_allow_list(self) -> tuple[int, ...] | None:
        """Ids restricting the universe. The ordered list wins over ``ids``."""
        if self.ids_order is not None:
            return self.ids_order
        return self.ids

    def to_filters(self, *, restrict_ids: bool = True) -> FilterGroup:
        """Compile into statement filters.

        Args:
            restrict_ids: Add the id allow-list filter. Relevance ordering
                restricts ids itself and passes False.
        """
        filters: list[StatementFilter] = []
        if self.price is not None:
            filters.append(PriceFilter(CatalogItem.price, self.price))
        if self.tag_ids:
            filters.append(TagFilter(self.tag_ids))
        for column, value in (
            (CatalogItem.style_id, self.style_id),
            (CatalogItem.user_id, self.user_id),
            (CatalogItem.set_id, self.set_id),
        ):
            if value is not None:
                filters.append(EqualityFilter(column, value))
        if self.family_id is not None:
            filters.append(FamilyFilter(self.family_id))
        if self.search_term:
            filters.append(SearchFilter(CatalogItem.name, self.search_term))
        if restrict_ids and self.id_allow_list is not None:
            filters.append(CollectionFilter(CatalogItem.id, self.id_allow_list))
        if self.is_active is not None:
            filters.append(EqualityFilter(CatalogItem.is_active, self.is_active))
        if self.is_deleted is not None:
            filters.append(EqualityFilter(CatalogItem.is_deleted, self.is_deleted))
        return FilterGroup(filters)

    def fingerprint(self) -> str:
        """Short stable digest of every facet, including the id list in force.

        ``ids`` is an unordered allow-list and is hashed sorted. ``idsOrder``
        is hashed as given, so a relevance cursor only continues the same
        ranking. An ignored ``ids`` does not contribute.
        """
        data = self.model_dump(mode="json", exclude={"ids", "ids_order"})
        if self.ids_order is not None:
            data["ids_order"] = list(self.ids_order)
        elif self.ids is not None:
            data["ids"] = sorted(set(self.ids))
        raw = json.dumps(data, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(raw.encode()).hexdigest()[:16]


FACET_KEYS: frozenset[str] = frozenset(
    {name for name in CatalogFacets.model_fields}
    | {field.alias for field in CatalogFacets.model_fields.values() if field.alias}
)


def compile_facets(
    filters: Mapping[str, Any] | CatalogFacets | None,
    *,
    restrict_ids: bool = True,
) -> tuple[CatalogFacets, FilterGroup]:
    """Validate a facet map and compile it.

    Args:
        filters: Facet map, an already built ``CatalogFacets``, or None.
        restrict_ids: See ``CatalogFacets.to_filters``.

    Returns:
        The validated facets and their filter group.

    Raises:
        ValidationException: On unknown facet keys or invalid facet values.
    """
    if isinstance(filters, CatalogFacets):
        facets = filters
    else:
        data = dict(filters or {})
        unknown = sorted(key for key in data if key not in FACET_KEYS)
        if unknown:
            raise ValidationException(
                detail=f"Unknown filter facet(s): {', '.join(unknown)}",
                type="unknown-facet",
                extra={"facets": unknown},
            )
        try:
            facets = CatalogFacets.model_validate(data)
        except ValidationError as e:
            errors = [
                {"facet": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ]
            raise ValidationException(
                detail="Invalid filter facet value(s)",
                type="invalid-facet",
                extra={"errors": errors},
            ) from e

    return facets, facets.to_filters(restrict_ids=restrict_ids)


__all__ = [
    "FACET_KEYS",
    "CatalogFacets",
    "FamilyFilter",
    "PriceFilter",
    "TagFilter",
    "compile_facets",
]
