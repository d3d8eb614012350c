"""Tests for application exceptions."""
from __future__ import annotations

import pytest

from catalog_pager.core.database import InvalidFilterError, RepositoryError
from catalog_pager.core.exceptions import (
    AppException,
    InvalidCursorException,
    ValidationException,
)


@pytest.mark.unit
class TestAppExceptions:
    """Problem-details fields of the exception hierarchy."""

    def test_validation_exception(self):
        """ValidationException maps to 422."""
        exc = ValidationException("limit must be a positive integer", extra={"field": "limit"})

        assert isinstance(exc, AppException)
        assert exc.status_code == 422
        assert exc.type == "validation-error"
        assert exc.title == "Validation Error"
        assert exc.extra == {"field": "limit"}
        assert str(exc) == "limit must be a positive integer"

    def test_invalid_cursor_exception(self):
        """InvalidCursorException maps to 400."""
        exc = InvalidCursorException("Cursor token is malformed")

        assert exc.status_code == 400
        assert exc.type == "invalid-cursor"
        assert exc.title == "Invalid Cursor"
        assert exc.extra == {}

    def test_default_title(self):
        """Titles default from the status code."""
        assert AppException(404, "missing").title == "Not Found"
        assert AppException(418, "teapot").title == "Error"


@pytest.mark.unit
class TestRepositoryErrors:
    """Repository-level errors."""

    def test_details_in_message(self):
        """Details are appended to the message."""
        exc = InvalidFilterError("Unknown price tier: 'cheap'", filter_name="price")

        assert isinstance(exc, RepositoryError)
        assert str(exc) == "Unknown price tier: 'cheap' (filter='price')"

    def test_plain_message(self):
        """Without details the message is unchanged."""
        assert str(RepositoryError("boom")) == "boom"
