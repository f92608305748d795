"""
analytics/base.py

Abstract base class for per-dimension group accumulators.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from analytics.formulas import profit_margin
from app.domain.sales import AggregateResult, SalesRecord


class BaseAccumulator(ABC):
    """
    Running totals for one group key.

    Aggregation has two distinct stages:

    1. :meth:`add` folds one record into raw totals.  Subclasses extend
       :meth:`_add` with their dimension-specific counter.
    2. :meth:`finalize` derives ratios from the raw totals and returns an
       immutable result row.  It is called once, after every record of
       the group has been folded.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        self.total_sales = 0.0
        self.total_profit = 0.0
        self.order_count = 0

    def add(self, record: SalesRecord) -> None:
        self.total_sales += record.total_revenue
        self.total_profit += record.total_profit
        self.order_count += 1
        self._add(record)

    def _add(self, record: SalesRecord) -> None:
        """Hook for dimension-specific counters; no-op by default."""

    @property
    def profit_margin(self) -> float:
        return profit_margin(self.total_profit, self.total_sales)

    @abstractmethod
    def finalize(self) -> AggregateResult:
        """
        Return the immutable aggregate row for this group.
        """
