"""
insights/rules.py

Trend and margin-health insight rules.

Rules evaluated (in order)
--------------------------
1. Month-over-month revenue  – percent change between the two latest months.
2. Average margin            – mean of per-record profit/revenue ratios.
3. Low-margin line count     – how many records sit under the ratio floor.

Rule 2 uses a mean of ratios, while the aggregator's profit margin is a
ratio of sums, so the two can disagree for the same dataset.
"""

from __future__ import annotations

from typing import Sequence

from analytics.formulas import percent_change, safe_ratio
from analytics.summary import monthly_sales
from app.domain.sales import SalesRecord
from insights.base import BaseInsightRule


def record_margin_ratio(record: SalesRecord) -> float:
    """profit / revenue for one record; 0.0 when revenue is zero."""
    return safe_ratio(record.total_profit, record.total_revenue)


class MonthOverMonthRule(BaseInsightRule):
    """
    Compares total revenue of the two chronologically latest months.

    The change is reported as an absolute percentage with the direction
    in words.  A prior month total of zero reports 0.0 %.
    """

    name = "month_over_month"

    def evaluate(self, records: Sequence[SalesRecord]) -> str | None:
        months = monthly_sales(records)
        if len(months) < 2:
            return None

        previous, latest = months[-2], months[-1]
        diff = latest.total_sales - previous.total_sales
        pct = abs(percent_change(latest.total_sales, previous.total_sales))
        direction = "increased" if diff > 0 else "decreased"
        return f"Sales {direction} {pct:.1f}% compared to last month."


class AverageMarginRule(BaseInsightRule):
    """
    Flags a dataset whose mean per-record margin ratio is below threshold.
    """

    name = "average_margin"

    def __init__(self, threshold: float = 0.15) -> None:
        self.threshold = threshold

    def evaluate(self, records: Sequence[SalesRecord]) -> str | None:
        if not records:
            return None
        average = sum(record_margin_ratio(record) for record in records) / len(records)
        if average >= self.threshold:
            return None
        return (
            f"Average profit margin is low: {average * 100:.1f}%. "
            "Consider reviewing product pricing."
        )


class LowMarginCountRule(BaseInsightRule):
    """
    Flags a dataset with more than ``min_count`` records under ``ratio``.
    """

    name = "low_margin_count"

    def __init__(self, ratio: float = 0.10, min_count: int = 5) -> None:
        self.ratio = ratio
        self.min_count = min_count

    def evaluate(self, records: Sequence[SalesRecord]) -> str | None:
        low = sum(1 for record in records if record_margin_ratio(record) < self.ratio)
        if low <= self.min_count:
            return None
        return f"More than {self.min_count} products are under {self.ratio * 100:g}% profit margin."
