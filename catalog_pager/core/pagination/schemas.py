"""Page envelope returned by cursor pagination.

Field names are snake_case in Python and camelCase on the wire:

    {
        "results": [...],
        "pageInfo": {
            "hasNextPage": true,
            "hasPreviousPage": false,
            "startCursor": "eyJtIjoi...",
            "endCursor": "eyJtIjoi...",
            "totalCount": null
        }
    }
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class PageInfo(BaseModel):
    """Pagination metadata.

    Attributes:
        has_next_page: Whether rows exist after this page
        has_previous_page: Whether this page was requested with a cursor
        start_cursor: Cursor of the first row in this page
        end_cursor: Cursor of the last row in this page
        total_count: Total matching rows (only when requested, can be expensive)
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    has_next_page: bool = Field(description="Whether more items exist")
    has_previous_page: bool = Field(description="Whether previous items exist")
    start_cursor: str | None = Field(
        default=None,
        description="Cursor of the first item",
    )
    end_cursor: str | None = Field(
        default=None,
        description="Cursor of the last item",
    )
    total_count: int | None = Field(
        default=None,
        description="Total count (optional)",
    )


class CursorPage(BaseModel, Generic[T]):
    """One page of results plus navigation metadata.

    Pass ``page_info.end_cursor`` back as the cursor of the next call to
    continue forward.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        arbitrary_types_allowed=True,
    )

    results: list[T] = Field(
        default_factory=list,
        description="Items of this page, in sort order",
    )
    page_info: PageInfo = Field(description="Pagination metadata")

    @classmethod
    def empty(cls, *, has_previous_page: bool = False, total_count: int | None = None) -> CursorPage[T]:
        """Build a page with no results."""
        return cls(
            results=[],
            page_info=PageInfo(
                has_next_page=False,
                has_previous_page=has_previous_page,
                total_count=total_count,
            ),
        )


__all__ = [
    "CursorPage",
    "PageInfo",
]
