"""
app/validators/sales_row_validator.py

Row-level validation and type parsing for sales export ingestion.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from app.domain.sales import RowValidationError, SalesRecord
from app.errors import CoercionError, ParseError
from app.validators.coercion import coerce_number, is_blank, parse_date

NUMERIC_FIELDS: tuple[str, ...] = (
    "quantity",
    "unit_cost",
    "unit_price",
    "total_revenue",
    "total_profit",
    "total_profit_pct",
)

REQUIRED_FIELDS: tuple[str, ...] = (
    "product",
    "transaction_date",
    "total_revenue",
    "total_profit",
)


class SalesRowValidator:
    """
    Validates and parses one mapped sales row into a :class:`SalesRecord`.

    Every problem in the row is collected before raising, so one error
    reports all bad columns at once.  A row whose only problems are
    numeric conversions raises :class:`CoercionError`; anything else
    raises :class:`ParseError`.
    """

    def is_completely_empty_row(self, row: Mapping[str, Any] | list[str]) -> bool:
        """
        Return True when all values in the row are empty or whitespace.
        """

        values = row.values() if isinstance(row, Mapping) else row
        return all(is_blank(value) for value in values)

    def parse_row(
        self,
        *,
        mapped_row: Mapping[str, Any],
        row_number: int,
        source: str | None = None,
    ) -> SalesRecord:
        """
        Validate and parse one canonical mapped row.

        Raises
        ------
        CoercionError
            When one or more numeric fields cannot be converted.
        ParseError
            When a required value is missing or a date is unparsable.
        """

        errors: list[RowValidationError] = []
        coercion_failures: list[CoercionError] = []

        for column in REQUIRED_FIELDS:
            if is_blank(mapped_row.get(column)):
                errors.append(
                    RowValidationError(
                        row_number=row_number,
                        column=column,
                        message="Required value is missing.",
                        value=None,
                    )
                )

        numbers: dict[str, float | None] = {}
        for column in NUMERIC_FIELDS:
            try:
                numbers[column] = coerce_number(mapped_row.get(column), field=column)
            except CoercionError as exc:
                coercion_failures.append(exc)
                numbers[column] = None
                errors.append(
                    RowValidationError(
                        row_number=row_number,
                        column=column,
                        message="Value is not a valid number.",
                        value=self._stringify_value(mapped_row.get(column)),
                    )
                )

        quantity = numbers["quantity"]
        if quantity is not None and quantity < 0:
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column="quantity",
                    message="Quantity must not be negative.",
                    value=self._stringify_value(mapped_row.get("quantity")),
                )
            )

        transaction_date = self._parse_date_field(
            mapped_row=mapped_row,
            column="transaction_date",
            row_number=row_number,
            errors=errors,
        )
        requested_date = self._parse_date_field(
            mapped_row=mapped_row,
            column="requested_date",
            row_number=row_number,
            errors=errors,
        )

        if errors:
            if len(coercion_failures) == len(errors):
                first = coercion_failures[0]
                raise CoercionError(
                    f"Row {row_number} has values that cannot be converted to numbers.",
                    field=first.field,
                    value=first.value,
                    source=source,
                    row_number=row_number,
                    errors=errors,
                ) from first
            raise ParseError(
                f"Row {row_number} failed validation.",
                source=source,
                row_number=row_number,
                errors=errors,
            )

        return SalesRecord(
            product=str(mapped_row["product"]).strip(),
            transaction_date=transaction_date,
            total_revenue=numbers["total_revenue"],
            total_profit=numbers["total_profit"],
            customer=self._parse_optional_string(mapped_row.get("customer")),
            sales_rep=self._parse_optional_string(mapped_row.get("sales_rep")),
            quantity=quantity,
            unit_cost=numbers["unit_cost"],
            unit_price=numbers["unit_price"],
            total_profit_pct=numbers["total_profit_pct"],
            payment_status=self._parse_optional_string(mapped_row.get("payment_status")),
            requested_date=requested_date,
            source=source,
        )

    def _parse_date_field(
        self,
        *,
        mapped_row: Mapping[str, Any],
        column: str,
        row_number: int,
        errors: list[RowValidationError],
    ) -> date | None:
        value = mapped_row.get(column)
        try:
            return parse_date(value)
        except ValueError:
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column=column,
                    message="Invalid date format.",
                    value=self._stringify_value(value),
                )
            )
            return None

    @staticmethod
    def _parse_optional_string(value: Any) -> str | None:
        if is_blank(value):
            return None
        return str(value).strip()

    @staticmethod
    def _stringify_value(value: Any) -> str | None:
        if value is None:
            return None
        return str(value)
