"""Pydantic schemas for the catalog feature."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from catalog_pager.features.catalog.facets import PriceTier

SearchSort = Literal["newest", "bestseller", "relevance"]


class CatalogItemRead(BaseModel):
    """Catalog item as returned in a page of results."""

    model_config = ConfigDict(
        from_attributes=True,
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int
    name: str
    price: Decimal
    popularity: int
    set_id: int | None = None
    style_id: int | None = None
    user_id: int | None = None
    is_active: bool
    is_deleted: bool
    created_at: datetime
    updated_at: datetime

    @property
    def is_free(self) -> bool:
        return self.price == 0


class SearchParams(BaseModel):
    """Arguments of ``CatalogService.search`` as one object.

    ``ids`` is an unordered allow-list for ``newest``/``bestseller`` and the
    ranked list for ``relevance``.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )

    price: PriceTier = "all"
    tag_ids: list[int] | None = None
    style_id: int | None = None
    user_id: int | None = None
    set_id: int | None = None
    family_id: int | None = None
    search_term: str | None = None
    ids: list[int] | None = None
    cursor: str | None = None
    limit: int = Field(default=20, description="Page size; capped at the configured maximum")
    sort: SearchSort = "newest"


__all__ = [
    "CatalogItemRead",
    "SearchParams",
    "SearchSort",
]
