"""
analytics/accumulators.py

Concrete accumulators, one per aggregation dimension.
"""

from __future__ import annotations

from analytics.base import BaseAccumulator
from app.domain.sales import (
    CustomerSales,
    DepartmentSales,
    ProductSales,
    SalesRecord,
    SalesRepPerformance,
)


class DepartmentAccumulator(BaseAccumulator):
    def finalize(self) -> DepartmentSales:
        return DepartmentSales(
            department=self.key,
            total_sales=self.total_sales,
            total_profit=self.total_profit,
            profit_margin=self.profit_margin,
            order_count=self.order_count,
        )


class CustomerAccumulator(BaseAccumulator):
    def finalize(self) -> CustomerSales:
        return CustomerSales(
            customer=self.key,
            total_sales=self.total_sales,
            total_profit=self.total_profit,
            profit_margin=self.profit_margin,
            order_count=self.order_count,
        )


class ProductAccumulator(BaseAccumulator):
    """Sums units sold; a record without a quantity contributes zero."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.units_sold = 0.0

    def _add(self, record: SalesRecord) -> None:
        if record.quantity is not None:
            self.units_sold += record.quantity

    def finalize(self) -> ProductSales:
        return ProductSales(
            product=self.key,
            total_sales=self.total_sales,
            total_profit=self.total_profit,
            profit_margin=self.profit_margin,
            units_sold=self.units_sold,
        )


class SalesRepAccumulator(BaseAccumulator):
    """
    Tracks distinct customers in a set, so repeat orders from one
    customer are counted once.
    """

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.customers: set[str] = set()

    def _add(self, record: SalesRecord) -> None:
        if record.customer is not None:
            self.customers.add(record.customer)

    def finalize(self) -> SalesRepPerformance:
        return SalesRepPerformance(
            name=self.key,
            total_sales=self.total_sales,
            total_profit=self.total_profit,
            profit_margin=self.profit_margin,
            customer_count=len(self.customers),
            order_count=self.order_count,
        )
