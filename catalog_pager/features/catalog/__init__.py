"""Catalog feature: item models, filter facets and paginated search."""

from __future__ import annotations

from .facets import CatalogFacets, compile_facets
from .models import CatalogItem, Family, IconSet, Style, Tag, catalog_item_tags
from .repository import CatalogItemRepository, get_catalog_item_repository
from .schemas import CatalogItemRead, SearchParams
from .service import CatalogService

__all__ = [
    "CatalogFacets",
    "CatalogItem",
    "CatalogItemRead",
    "CatalogItemRepository",
    "CatalogService",
    "Family",
    "IconSet",
    "SearchParams",
    "Style",
    "Tag",
    "catalog_item_tags",
    "compile_facets",
    "get_catalog_item_repository",
]
