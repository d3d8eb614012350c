"""Cursor encoding and decoding for keyset pagination.

Cursors are opaque strings that encode the boundary of a page: the
position of the last (or first) row a client has seen. The next query
seeks past that boundary instead of counting an OFFSET.

A cursor payload is tagged with the sort mode that produced it:

* ``field``: values of the sort column and the row id tie-break, plus the
  sort field name and direction.
* ``relevance``: zero-based position of the row in the caller's ranked id
  list.

Both carry a short fingerprint of the filters in force when the cursor
was minted, so a token cannot be replayed against a different query.

The wire format is compact JSON with one-letter keys, URL-safe base64
encoded without padding:

    {"m":"field","f":"createdAt","d":"desc","v":["2025-01-15T10:30:00","42"],"h":"9f2c01ab"}
"""

from __future__ import annotations

import base64
import json
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from catalog_pager.core.exceptions import InvalidCursorException

CursorMode = Literal["field", "relevance"]


class FieldCursor(BaseModel):
    """Boundary of a page ordered by a stored column.

    Attributes:
        field: Public name of the sort field (e.g. ``createdAt``)
        direction: Sort direction the cursor was minted under
        values: Sort column value and row id, in that order
        fingerprint: Digest of the filters in force
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    mode: Literal["field"] = Field(default="field", alias="m")
    field: str = Field(alias="f", min_length=1)
    direction: Literal["asc", "desc"] = Field(alias="d")
    values: tuple[Any, Any] = Field(alias="v")
    fingerprint: str = Field(default="", alias="h")


class RelevanceCursor(BaseModel):
    """Boundary of a page ordered by an external ranking.

    Attributes:
        position: Zero-based index of the boundary row in the ranked id list
        id: Identifier found at that position (informational)
        fingerprint: Digest of the filters in force
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    mode: Literal["relevance"] = Field(default="relevance", alias="m")
    position: int = Field(alias="p", ge=0, strict=True)
    id: Any = Field(default=None, alias="i")
    fingerprint: str = Field(default="", alias="h")


CursorPayload = Annotated[FieldCursor | RelevanceCursor, Field(discriminator="mode")]

_payload_adapter: TypeAdapter[FieldCursor | RelevanceCursor] = TypeAdapter(CursorPayload)


class CursorCodec:
    """Encode and decode pagination cursors.

    Decoding is pure parsing; no I/O happens here.

    Usage:
        token = CursorCodec.encode(FieldCursor(
            field="createdAt", direction="desc", values=(created_at, 42),
        ))

        payload = CursorCodec.decode(token, mode="field")
        print(payload.values)  # ("2025-01-15T10:30:00", 42)
    """

    @staticmethod
    def encode(payload: FieldCursor | RelevanceCursor) -> str:
        """Encode a cursor payload to an opaque string.

        Args:
            payload: Field or relevance boundary

        Returns:
            URL-safe base64 string without padding
        """
        data = payload.model_dump(mode="json", by_alias=True)
        json_str = json.dumps(data, separators=(",", ":"), sort_keys=True)
        return base64.urlsafe_b64encode(json_str.encode()).decode().rstrip("=")

    @staticmethod
    def decode(cursor: str, *, mode: CursorMode | None = None) -> FieldCursor | RelevanceCursor:
        """Decode a cursor string to its payload.

        Args:
            cursor: Token previously returned by ``encode``
            mode: Sort mode of the current request; a token tagged with any
                other mode is rejected

        Returns:
            The decoded payload

        Raises:
            InvalidCursorException: If the token is malformed, has the wrong
                shape, or belongs to a different sort mode
        """
        if not isinstance(cursor, str) or not cursor:
            raise InvalidCursorException(detail="Cursor must be a non-empty string")

        try:
            padded = cursor + "=" * (-len(cursor) % 4)
            raw = base64.b64decode(padded, altchars=b"-_", validate=True)
            payload = _payload_adapter.validate_python(json.loads(raw.decode()))
        except ValueError as e:
            raise InvalidCursorException(
                detail="Cursor token is malformed",
                extra={"reason": str(e).splitlines()[0] if str(e) else type(e).__name__},
            ) from e

        if mode is not None and payload.mode != mode:
            raise InvalidCursorException(
                detail="Cursor was issued for a different sort mode",
                type="cursor-mode-mismatch",
                extra={"expected": mode, "actual": payload.mode},
            )
        return payload


__all__ = [
    "CursorCodec",
    "CursorMode",
    "CursorPayload",
    "FieldCursor",
    "RelevanceCursor",
]
