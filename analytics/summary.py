"""
analytics/summary.py

Dataset-level figures: the covered period, headline totals, and the
monthly and weekday breakdowns that feed trend charts.
"""

from __future__ import annotations

from datetime import date
from typing import Sequence

from analytics.formulas import profit_margin
from app.domain.sales import MonthlySales, SalesRecord, SalesSummary, WeekdaySales
from app.errors import EmptyDatasetError

WEEKDAYS: tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


def period_range(records: Sequence[SalesRecord]) -> tuple[date, date]:
    """
    Return the earliest and latest transaction dates in *records*.

    Raises
    ------
    EmptyDatasetError
        When *records* is empty; there is no period to report.
    """
    if not records:
        raise EmptyDatasetError("Cannot compute a period range over zero records.")
    dates = [record.transaction_date for record in records]
    return min(dates), max(dates)


def sales_summary(records: Sequence[SalesRecord]) -> SalesSummary:
    """
    Total sales, total profit and ratio-of-sums margin.  Zeros when empty.
    """
    total_sales = sum(record.total_revenue for record in records)
    total_profit = sum(record.total_profit for record in records)
    return SalesSummary(
        total_sales=total_sales,
        total_profit=total_profit,
        profit_margin=profit_margin(total_profit, total_sales),
        record_count=len(records),
    )


def monthly_sales(records: Sequence[SalesRecord]) -> list[MonthlySales]:
    """
    Revenue and profit per calendar month, in chronological order.
    """
    totals: dict[tuple[int, int], list[float]] = {}
    for record in records:
        key = (record.transaction_date.year, record.transaction_date.month)
        bucket = totals.setdefault(key, [0.0, 0.0, 0])
        bucket[0] += record.total_revenue
        bucket[1] += record.total_profit
        bucket[2] += 1

    return [
        MonthlySales(
            year=year,
            month=month,
            total_sales=sales,
            total_profit=profit,
            profit_margin=profit_margin(profit, sales),
            record_count=int(count),
        )
        for (year, month), (sales, profit, count) in sorted(totals.items())
    ]


def sales_by_weekday(records: Sequence[SalesRecord]) -> list[WeekdaySales]:
    """
    Revenue per day of week, always seven rows starting with Sunday.
    """
    totals = dict.fromkeys(WEEKDAYS, 0.0)
    for record in records:
        # date.weekday() is Monday=0; shift so Sunday leads.
        day = WEEKDAYS[(record.transaction_date.weekday() + 1) % 7]
        totals[day] += record.total_revenue
    return [WeekdaySales(weekday=day, total_sales=total) for day, total in totals.items()]
