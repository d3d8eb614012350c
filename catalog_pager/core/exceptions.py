"""Custom exception classes for the application."""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base application exception.

    All custom exceptions should inherit from this class.
    Follows RFC 7807 Problem Details so the calling service layer can
    translate errors into responses without inspecting messages.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, human-readable summary of the problem type.
        instance: URI reference that identifies the specific occurrence of the problem.
        extra: Additional context-specific information about the error.

    Example:
        raise AppException(
            status_code=422,
            detail="limit must be a positive integer",
            type="validation-error",
            extra={"field": "limit", "value": 0},
        )
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            status_code: HTTP status code.
            detail: Human-readable error message.
            type: Error type identifier.
            title: Short summary of the problem type.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        """Get default title for HTTP status code."""
        titles = {
            400: "Bad Request",
            404: "Not Found",
            422: "Unprocessable Entity",
            500: "Internal Server Error",
        }
        return titles.get(status_code, "Error")


class ValidationException(AppException):
    """Exception raised for invalid pagination arguments.

    Covers a non-positive or non-numeric limit, an unknown sort key or
    direction, and unknown or malformed facets.

    Example:
        raise ValidationException(
            detail="Unknown filter facet(s): colour",
            type="unknown-facet",
            extra={"facets": ["colour"]},
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "validation-error",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation exception.

        Args:
            detail: Human-readable error message.
            type: Error type identifier.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        super().__init__(
            status_code=422,
            detail=detail,
            type=type,
            title="Validation Error",
            instance=instance,
            extra=extra,
        )


class InvalidCursorException(AppException):
    """Exception raised when a cursor token cannot be used.

    The token either failed to decode or was minted under a different
    sort mode, sort key or filter set than the current request.

    Example:
        raise InvalidCursorException(
            detail="Cursor was issued for a different sort mode",
            extra={"expected": "field", "actual": "relevance"},
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "invalid-cursor",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid cursor exception.

        Args:
            detail: Human-readable error message.
            type: Error type identifier.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        super().__init__(
            status_code=400,
            detail=detail,
            type=type,
            title="Invalid Cursor",
            instance=instance,
            extra=extra,
        )


__all__ = [
    "AppException",
    "InvalidCursorException",
    "ValidationException",
]
