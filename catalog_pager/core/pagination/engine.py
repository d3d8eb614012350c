"""Keyset page assembly.

``KeysetPaginator`` runs one bounded query per page:

    1. decode the incoming cursor before any other argument, then check it
       against the sort and filters (before any SQL is built)
    2. narrow, order and bound the caller's filtered statement
    3. fetch ``limit + 1`` rows; the extra row only signals a next page
    4. mint start/end cursors and wrap rows

It never commits, retries or caches. The caller's session is the
transaction handle and every call is a fresh read.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from catalog_pager.core.exceptions import InvalidCursorException, ValidationException
from catalog_pager.core.pagination.cursor import CursorCodec, FieldCursor, RelevanceCursor
from catalog_pager.core.pagination.schemas import CursorPage, PageInfo
from catalog_pager.core.settings import get_pagination_settings
from catalog_pager.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from catalog_pager.core.pagination.sorting import SortStrategy

logger = logging.getLogger(__name__)
_lazy = get_lazy_logger(__name__)


def normalize_limit(limit: Any, max_limit: int) -> int:
    """Validate a requested page size and cap it at ``max_limit``.

    Integers and integer strings are accepted. Anything else, and any value
    below 1, is rejected rather than clamped.

    Raises:
        ValidationException: If ``limit`` is not a positive integer.
    """
    if isinstance(limit, bool):
        raise ValidationException(
            detail="limit must be a positive integer",
            extra={"field": "limit", "value": limit},
        )
    if isinstance(limit, str):
        try:
            limit = int(limit.strip())
        except ValueError as e:
            raise ValidationException(
                detail="limit must be a positive integer",
                extra={"field": "limit", "value": limit},
            ) from e
    if not isinstance(limit, int) or limit <= 0:
        raise ValidationException(
            detail="limit must be a positive integer",
            extra={"field": "limit", "value": limit},
        )
    if limit > max_limit:
        logger.info(
            "Requested page size capped",
            extra={"requested_limit": limit, "max_limit": max_limit},
        )
        return max_limit
    return limit


def read_cursor(cursor: str | None) -> FieldCursor | RelevanceCursor | None:
    """Decode a request cursor without checking it against any query.

    None and "" mean the first page.

    Raises:
        InvalidCursorException: If the token is malformed.
    """
    if not cursor:
        return None
    try:
        return CursorCodec.decode(cursor)
    except InvalidCursorException as e:
        logger.warning("Rejected pagination cursor", extra={"reason": e.type})
        raise


class KeysetPaginator:
    """Assemble keyset pages over a filtered SQLAlchemy statement.

    Example:
        paginator = KeysetPaginator()
        stmt = facets_filter.apply(select(CatalogItem))
        page = await paginator.paginate(
            session,
            stmt,
            FieldSort("createdAt", CatalogItem.created_at, CatalogItem.id, "desc"),
            cursor=request_cursor,
            limit=20,
            fingerprint=facets.fingerprint(),
            factory=CatalogItemRead.model_validate,
        )
    """

    def __init__(self, *, max_limit: int | None = None) -> None:
        """Initialize paginator.

        Args:
            max_limit: Page size cap. Defaults to ``PaginationSettings.max_limit``,
                read on every call.
        """
        self._max_limit = max_limit

    @property
    def max_limit(self) -> int:
        return self._max_limit or get_pagination_settings().max_limit

    async def paginate(
        self,
        session: AsyncSession,
        statement: Select[Any],
        strategy: SortStrategy,
        *,
        cursor: str | FieldCursor | RelevanceCursor | None = None,
        limit: Any = None,
        fingerprint: str = "",
        include_total_count: bool = False,
        factory: Callable[[Any], Any] | None = None,
    ) -> CursorPage[Any]:
        """Fetch one page.

        Args:
            session: Caller's session; nothing is committed.
            statement: ``select(Model)`` with every filter already applied.
            strategy: Ordering and boundary logic for this request.
            cursor: ``end_cursor`` of the previous page, raw or already
                passed through ``read_cursor``. None or "" starts from the
                beginning.
            limit: Requested page size. Defaults to ``PaginationSettings.default_limit``.
            fingerprint: Digest of the filters in force; stored in minted
                cursors and compared against incoming ones.
            include_total_count: Also count every row matching the filters
                (one extra query, ignores the cursor).
            factory: Maps each ORM row to the returned item. Rows are
                returned as-is when None.

        Returns:
            The page, with at most ``limit`` results.

        Raises:
            ValidationException: If ``limit`` is invalid.
            InvalidCursorException: If ``cursor`` cannot be used with this
                request.
            sqlalchemy.exc.SQLAlchemyError: Store errors, re-raised unchanged.
        """
        payload = read_cursor(cursor) if isinstance(cursor, str | None) else cursor

        if limit is None:
            limit = get_pagination_settings().default_limit
        safe_limit = normalize_limit(limit, self.max_limit)

        if payload is not None:
            try:
                strategy.check(payload)
                if payload.fingerprint != fingerprint:
                    raise InvalidCursorException(
                        detail="Cursor was issued for a different set of filters",
                        type="cursor-filter-mismatch",
                    )
            except InvalidCursorException as e:
                logger.warning(
                    "Rejected pagination cursor",
                    extra={"reason": e.type, "mode": strategy.mode},
                )
                raise
            _lazy.debug(lambda: f"Decoded cursor: {payload.model_dump()}")

        has_previous_page = payload is not None

        if strategy.is_empty:
            _lazy.debug("Sort strategy matches nothing; skipping query")
            return CursorPage.empty(
                has_previous_page=has_previous_page,
                total_count=0 if include_total_count else None,
            )

        filtered = strategy.restrict(statement)
        page_stmt = strategy.order(filtered)
        if payload is not None:
            page_stmt = page_stmt.where(strategy.boundary(payload))
        page_stmt = page_stmt.limit(safe_limit + 1)

        _lazy.debug("Page statement: %s", lambda: str(page_stmt))

        try:
            result = await session.execute(page_stmt)
            rows = list(result.scalars().all())

            total_count = None
            if include_total_count:
                count_stmt = select(func.count()).select_from(
                    filtered.order_by(None).subquery()
                )
                total_count = (await session.execute(count_stmt)).scalar_one()
        except SQLAlchemyError:
            logger.exception(
                "Page query failed",
                extra={"mode": strategy.mode, "limit": safe_limit},
            )
            raise

        has_next_page = len(rows) > safe_limit
        if has_next_page:
            rows = rows[:safe_limit]

        start_cursor = end_cursor = None
        if rows:
            start_cursor = CursorCodec.encode(strategy.cursor_for(rows[0], fingerprint))
            end_cursor = CursorCodec.encode(strategy.cursor_for(rows[-1], fingerprint))

        results = [factory(row) for row in rows] if factory else rows

        logger.debug(
            "Page fetched",
            extra={
                "mode": strategy.mode,
                "limit": safe_limit,
                "returned": len(results),
                "has_next_page": has_next_page,
                "has_previous_page": has_previous_page,
            },
        )

        return CursorPage(
            results=results,
            page_info=PageInfo(
                has_next_page=has_next_page,
                has_previous_page=has_previous_page,
                start_cursor=start_cursor,
                end_cursor=end_cursor,
                total_count=total_count,
            ),
        )


__all__ = [
    "KeysetPaginator",
    "normalize_limit",
    "read_cursor",
]
