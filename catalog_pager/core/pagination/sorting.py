"""Sort strategies for keyset pagination.

A sort strategy owns everything that depends on how a result set is
ordered: the ORDER BY clause, the boundary predicate built from a decoded
cursor, and the cursor minted for a row. Keeping the three together means
a new ordering cannot be added without deciding how its cursors look.

Two strategies exist:

FieldSort:
    Orders by a stored column with the primary key as tie-break, so the
    ordering is total even when column values repeat. For ORDER BY
    created_at DESC, id DESC with cursor at (t1, id1) the boundary is:

        WHERE (created_at < t1) OR (created_at = t1 AND id < id1)

RelevanceSort:
    Orders by the position of each row id in a caller-supplied ranked list.
    The id -> position mapping is pushed into the same query as a CASE
    expression, and rows whose id is not listed are excluded:

        WHERE id IN (7, 3, 9) AND CASE id WHEN 7 THEN 0 WHEN 3 THEN 1 WHEN 9 THEN 2 END > :pos
        ORDER BY CASE id WHEN 7 THEN 0 WHEN 3 THEN 1 WHEN 9 THEN 2 END
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, ClassVar, Literal

from sqlalchemy import and_, case, or_

from catalog_pager.core.exceptions import InvalidCursorException
from catalog_pager.core.pagination.cursor import CursorMode, FieldCursor, RelevanceCursor

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Select
    from sqlalchemy.orm import InstrumentedAttribute

SortDirection = Literal["asc", "desc"]


class SortStrategy(ABC):
    """Ordering, boundary predicate and cursor minting for one sort mode."""

    mode: ClassVar[CursorMode]

    @property
    def is_empty(self) -> bool:
        """Whether the strategy can be proven to match nothing without a query."""
        return False

    def restrict(self, statement: Select[Any]) -> Select[Any]:
        """Narrow the result universe before ordering (no-op by default)."""
        return statement

    @abstractmethod
    def order(self, statement: Select[Any]) -> Select[Any]:
        """Apply the ORDER BY clause."""
        ...

    @abstractmethod
    def boundary(self, cursor: FieldCursor | RelevanceCursor) -> ColumnElement[bool]:
        """Build the predicate selecting rows strictly after ``cursor``."""
        ...

    @abstractmethod
    def cursor_for(self, row: Any, fingerprint: str) -> FieldCursor | RelevanceCursor:
        """Mint the cursor pointing at ``row``."""
        ...

    def check(self, cursor: FieldCursor | RelevanceCursor) -> None:
        """Reject a decoded cursor minted under a different sort."""
        if cursor.mode != self.mode:
            raise self._mode_mismatch(cursor)

    def _mode_mismatch(self, cursor: FieldCursor | RelevanceCursor) -> InvalidCursorException:
        return InvalidCursorException(
            detail="Cursor was issued for a different sort mode",
            type="cursor-mode-mismatch",
            extra={"expected": self.mode, "actual": cursor.mode},
        )


class FieldSort(SortStrategy):
    """Order by a stored column, breaking ties with the primary key.

    Example:
        strategy = FieldSort("createdAt", CatalogItem.created_at, CatalogItem.id, "desc")
        stmt = strategy.order(select(CatalogItem))
        # ORDER BY created_at DESC, id DESC
    """

    mode: ClassVar[CursorMode] = "field"

    def __init__(
        self,
        name: str,
        column: InstrumentedAttribute[Any],
        tiebreak: InstrumentedAttribute[Any],
        direction: SortDirection = "desc",
    ) -> None:
        """Initialize field sort.

        Args:
            name: Public sort field name recorded in cursors (e.g. ``createdAt``)
            column: Column to order by
            tiebreak: Unique column used to break ties (the primary key)
            direction: "asc" or "desc"
        """
        self.name = name
        self.column = column
        self.tiebreak = tiebreak
        self.direction = direction

    def order(self, statement: Select[Any]) -> Select[Any]:
        if self.direction == "desc":
            return statement.order_by(self.column.desc(), self.tiebreak.desc())
        return statement.order_by(self.column.asc(), self.tiebreak.asc())

    def boundary(self, cursor: FieldCursor | RelevanceCursor) -> ColumnElement[bool]:
        """Build ``(column, id) > (value, id)``, reversed for descending order.

        Expanded into OR/AND form instead of a row-value comparison so the
        same SQL runs on every backend.
        """
        if not isinstance(cursor, FieldCursor):
            raise self._mode_mismatch(cursor)
        raw_value, raw_id = cursor.values
        value = _coerce_cursor_value(self.column, raw_value)
        row_id = _coerce_cursor_value(self.tiebreak, raw_id)

        if self.direction == "desc":
            return or_(
                self.column < value,
                and_(self.column == value, self.tiebreak < row_id),
            )
        return or_(
            self.column > value,
            and_(self.column == value, self.tiebreak > row_id),
        )

    def cursor_for(self, row: Any, fingerprint: str) -> FieldCursor:
        values = (
            _to_wire(getattr(row, self.column.key)),
            _to_wire(getattr(row, self.tiebreak.key)),
        )
        return FieldCursor(
            field=self.name,
            direction=self.direction,
            values=values,
            fingerprint=fingerprint,
        )

    def check(self, cursor: FieldCursor | RelevanceCursor) -> None:
        super().check(cursor)
        if not isinstance(cursor, FieldCursor):
            raise self._mode_mismatch(cursor)
        if cursor.field != self.name or cursor.direction != self.direction:
            raise InvalidCursorException(
                detail="Cursor was issued for a different sort order",
                type="cursor-sort-mismatch",
                extra={
                    "expected": f"{self.name} {self.direction}",
                    "actual": f"{cursor.field} {cursor.direction}",
                },
            )
        if cursor.values[0] is None or cursor.values[1] is None:
            raise InvalidCursorException(detail="Cursor boundary values are incomplete")
        # Parse eagerly so a bad value fails before any SQL is built
        _coerce_cursor_value(self.column, cursor.values[0])
        _coerce_cursor_value(self.tiebreak, cursor.values[1])


class RelevanceSort(SortStrategy):
    """Order by position in an externally ranked list of ids.

    Rows whose id is missing from the list are excluded. If an id is listed
    more than once, its first position wins.

    Example:
        strategy = RelevanceSort([7, 3, 9], CatalogItem.id)
        stmt = strategy.order(strategy.restrict(select(CatalogItem)))
    """

    mode: ClassVar[CursorMode] = "relevance"

    def __init__(
        self,
        ordered_ids: Sequence[Any],
        id_column: InstrumentedAttribute[Any],
    ) -> None:
        """Initialize relevance sort.

        Args:
            ordered_ids: Ranked identifiers, best match first
            id_column: Column holding the identifiers
        """
        positions: dict[Any, int] = {}
        for index, item_id in enumerate(ordered_ids):
            positions.setdefault(item_id, index)
        self.positions = positions
        self.id_column = id_column

    @property
    def is_empty(self) -> bool:
        return not self.positions

    @property
    def position(self) -> ColumnElement[Any]:
        """SQL expression mapping each row id to its rank."""
        return case(self.positions, value=self.id_column)

    def restrict(self, statement: Select[Any]) -> Select[Any]:
        return statement.where(self.id_column.in_(list(self.positions)))

    def order(self, statement: Select[Any]) -> Select[Any]:
        return statement.order_by(self.position.asc())

    def boundary(self, cursor: FieldCursor | RelevanceCursor) -> ColumnElement[bool]:
        if not isinstance(cursor, RelevanceCursor):
            raise self._mode_mismatch(cursor)
        return self.position > cursor.position

    def cursor_for(self, row: Any, fingerprint: str) -> RelevanceCursor:
        row_id = getattr(row, self.id_column.key)
        return RelevanceCursor(
            position=self.positions[row_id],
            id=_to_wire(row_id),
            fingerprint=fingerprint,
        )


def _to_wire(value: Any) -> Any:
    """Convert a column value to its JSON-compatible cursor form."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (uuid.UUID, Decimal)):
        return str(value)
    return value


def _coerce_cursor_value(column: InstrumentedAttribute[Any], value: Any) -> Any:
    """Convert a cursor value back to the column's Python type.

    Handles datetime strings, UUIDs, decimals and integers that were
    serialized when the cursor was created.
    """
    if value is None:
        return None

    column_type = getattr(column.type, "impl", column.type)
    try:
        python_type = column_type.python_type
    except NotImplementedError:
        return value

    try:
        if python_type is datetime:
            return value if isinstance(value, datetime) else datetime.fromisoformat(value)
        if python_type is date:
            return value if isinstance(value, date) else date.fromisoformat(value)
        if python_type is uuid.UUID:
            return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
        if python_type is Decimal:
            return Decimal(str(value))
        if python_type is int:
            if isinstance(value, bool):
                raise TypeError("boolean is not an integer boundary")
            if isinstance(value, float) and not value.is_integer():
                raise TypeError("fractional value for integer column")
            return int(value)
        if python_type is float:
            return float(value)
    except (TypeError, ValueError, InvalidOperation) as e:
        raise InvalidCursorException(
            detail="Cursor boundary value does not match the sort column",
            extra={"column": column.key, "value": repr(value)},
        ) from e
    return value


__all__ = [
    "FieldSort",
    "RelevanceSort",
    "SortDirection",
    "SortStrategy",
]
