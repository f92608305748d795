"""
analytics/filters.py

Dataset narrowing ahead of re-running aggregation, alerts and insights.

Every function is pure: the input sequence is never mutated and a new
list is always returned.  Derived views are not recomputed here; the
caller re-invokes the aggregator and engines on the filtered result.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from analytics.departments import DepartmentClassifier, classify_department
from app.domain.sales import SalesRecord

ALL_DEPARTMENTS = "All"


def filter_by_department(
    records: Iterable[SalesRecord],
    department: str,
    *,
    classifier: DepartmentClassifier | None = None,
) -> list[SalesRecord]:
    """
    Keep records whose product classifies into *department*.

    ``"All"`` returns a copy of every record.
    """
    if department == ALL_DEPARTMENTS:
        return list(records)
    classify = classifier.classify if classifier is not None else classify_department
    return [record for record in records if classify(record.product) == department]


def filter_by_month(records: Iterable[SalesRecord], year: int, month: int) -> list[SalesRecord]:
    """
    Keep records whose transaction date falls in *year* / *month*.

    Raises
    ------
    ValueError
        If *month* is outside 1..12.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    return [
        record
        for record in records
        if record.transaction_date.year == year and record.transaction_date.month == month
    ]


def available_months(records: Iterable[SalesRecord]) -> list[tuple[int, int]]:
    """Distinct ``(year, month)`` keys present in *records*, ascending."""
    return sorted({(r.transaction_date.year, r.transaction_date.month) for r in records})


def available_departments(
    records: Sequence[SalesRecord],
    *,
    classifier: DepartmentClassifier | None = None,
) -> list[str]:
    """Distinct departments present in *records*, in first-seen order."""
    classify = classifier.classify if classifier is not None else classify_department
    return list(dict.fromkeys(classify(record.product) for record in records))
