"""
analytics/aggregator.py

Groups sales records by a dimension and reduces each group to summary
metrics.

Output ordering
---------------
department       – first-seen order (no sort)
customer         – descending total_sales, ties in first-seen order
product          – descending total_sales, ties in first-seen order
representative   – descending total_sales, ties in first-seen order
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from analytics.accumulators import (
    CustomerAccumulator,
    DepartmentAccumulator,
    ProductAccumulator,
    SalesRepAccumulator,
)
from analytics.base import BaseAccumulator
from analytics.departments import DepartmentClassifier, classify_department
from app.domain.sales import (
    AggregateResult,
    CustomerSales,
    DepartmentSales,
    ProductSales,
    SalesRecord,
    SalesRepPerformance,
)

UNKNOWN_GROUP = "Unknown"


class Dimension(str, Enum):
    DEPARTMENT = "department"
    CUSTOMER = "customer"
    PRODUCT = "product"
    REPRESENTATIVE = "representative"


@dataclass(frozen=True)
class _DimensionConfig:
    accumulator: type[BaseAccumulator]
    sort_by_sales: bool


_DIMENSIONS: dict[Dimension, _DimensionConfig] = {
    Dimension.DEPARTMENT:     _DimensionConfig(DepartmentAccumulator, sort_by_sales=False),
    Dimension.CUSTOMER:       _DimensionConfig(CustomerAccumulator, sort_by_sales=True),
    Dimension.PRODUCT:        _DimensionConfig(ProductAccumulator, sort_by_sales=True),
    Dimension.REPRESENTATIVE: _DimensionConfig(SalesRepAccumulator, sort_by_sales=True),
}


def _group_key(
    record: SalesRecord,
    dimension: Dimension,
    classify: Callable[[str | None], str],
) -> str:
    if dimension is Dimension.DEPARTMENT:
        return classify(record.product)
    if dimension is Dimension.CUSTOMER:
        return record.customer or UNKNOWN_GROUP
    if dimension is Dimension.PRODUCT:
        return record.product
    return record.sales_rep or UNKNOWN_GROUP


def aggregate(
    records: Iterable[SalesRecord],
    dimension: Dimension | str,
    *,
    classifier: DepartmentClassifier | None = None,
) -> list[AggregateResult]:
    """
    Reduce *records* into one aggregate row per distinct group key.

    Parameters
    ----------
    records:
        Sales records; any iterable, consumed once.
    dimension:
        A :class:`Dimension` or its string value.
    classifier:
        Department classifier used for the department dimension.
        Defaults to the built-in keyword rules.

    Returns
    -------
    list
        Fresh result rows ordered per the module docstring.  Empty for an
        empty input.

    Raises
    ------
    ValueError
        If *dimension* is not a supported dimension.
    """
    dim = Dimension(dimension)
    dim_config = _DIMENSIONS[dim]
    classify = classifier.classify if classifier is not None else classify_department

    groups: dict[str, BaseAccumulator] = {}
    for record in records:
        key = _group_key(record, dim, classify)
        accumulator = groups.get(key)
        if accumulator is None:
            accumulator = dim_config.accumulator(key)
            groups[key] = accumulator
        accumulator.add(record)

    results = [accumulator.finalize() for accumulator in groups.values()]
    if dim_config.sort_by_sales:
        # list.sort is stable, so ties keep first-seen order.
        results.sort(key=lambda row: row.total_sales, reverse=True)
    return results


def calculate_department_sales(
    records: Iterable[SalesRecord],
    *,
    classifier: DepartmentClassifier | None = None,
) -> list[DepartmentSales]:
    return aggregate(records, Dimension.DEPARTMENT, classifier=classifier)  # type: ignore[return-value]


def calculate_customer_sales(records: Iterable[SalesRecord]) -> list[CustomerSales]:
    return aggregate(records, Dimension.CUSTOMER)  # type: ignore[return-value]


def calculate_product_sales(records: Iterable[SalesRecord]) -> list[ProductSales]:
    return aggregate(records, Dimension.PRODUCT)  # type: ignore[return-value]


def calculate_sales_rep_performance(records: Iterable[SalesRecord]) -> list[SalesRepPerformance]:
    return aggregate(records, Dimension.REPRESENTATIVE)  # type: ignore[return-value]
