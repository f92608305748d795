"""
app/errors.py

Exception taxonomy for the sales analytics engine.

    SalesAnalyticsError
    ├── ParseError          – a source is malformed (header, arity, missing value, date)
    │   └── CoercionError   – a numeric field cannot be converted from its text form
    └── EmptyDatasetError   – an operation that needs at least one record got none

Arithmetic edge cases (zero denominators) are never errors; they resolve
to 0 inside the formula layer.
"""

from __future__ import annotations

from typing import Any, Sequence

from app.domain.sales import RowValidationError


class SalesAnalyticsError(Exception):
    """Base exception for all sales analytics failures."""


class ParseError(SalesAnalyticsError, ValueError):
    """
    Raised when a raw source cannot be turned into sales records.

    ``source`` names the failing input so a caller can tell which of
    several merged files was rejected.
    """

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        row_number: int | None = None,
        errors: Sequence[RowValidationError] = (),
    ) -> None:
        super().__init__(message)
        self.message = message
        self.source = source
        self.row_number = row_number
        self.errors = tuple(errors)

    def __str__(self) -> str:
        location = []
        if self.source is not None:
            location.append(f"source={self.source!r}")
        if self.row_number is not None:
            location.append(f"row={self.row_number}")
        if not location:
            return self.message
        return f"{self.message} ({', '.join(location)})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": type(self).__name__,
            "message": self.message,
            "source": self.source,
            "row_number": self.row_number,
            "errors": [
                {
                    "row_number": error.row_number,
                    "column": error.column,
                    "message": error.message,
                    "value": error.value,
                }
                for error in self.errors
            ],
        }


class CoercionError(ParseError):
    """
    Raised when a numeric field cannot be converted from its textual form.
    """

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        source: str | None = None,
        row_number: int | None = None,
        errors: Sequence[RowValidationError] = (),
    ) -> None:
        super().__init__(message, source=source, row_number=row_number, errors=errors)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["field"] = self.field
        payload["value"] = None if self.value is None else str(self.value)
        return payload


class EmptyDatasetError(SalesAnalyticsError):
    """Raised when an operation requiring at least one record receives none."""
