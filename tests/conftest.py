"""
tests/conftest.py

Shared fixtures: a sales record factory and small in-memory exports.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Callable

import pytest

from app.domain.sales import SalesRecord, SalesSource

SALES_BY_ITEM_CSV = (
    "Product,Customer,Sales Rep,Qty,Unit Cost,Unit Price,Total Revenue,"
    "Total Profit $,Total Profit %,Invoice Payment Status,Reqs. Date\n"
    "Basil,Acme,Dana,10,1.00,2.00,20.00,10.00,50%,Paid,2024-01-10\n"
    'Carrot,Beta,Eli,5,"$1,000.00","$1,200.00","$6,000.00","$1,000.00",16.7%,Unpaid,2024-01-05\n'
)

DASHBOARD_CSV = (
    "date,product,sales,profit\n"
    "2024-02-01,Kale,300,30\n"
    "2024-01-05,Red Pepper,200,40\n"
)

RecordFactory = Callable[..., SalesRecord]


@pytest.fixture()
def make_record() -> RecordFactory:
    """Build a :class:`SalesRecord` with sensible defaults."""

    def _make(
        product: str = "Basil",
        revenue: float = 100.0,
        profit: float = 20.0,
        when: date = date(2024, 1, 15),
        **extra: Any,
    ) -> SalesRecord:
        return SalesRecord(
            product=product,
            transaction_date=when,
            total_revenue=revenue,
            total_profit=profit,
            **extra,
        )

    return _make


@pytest.fixture()
def sales_by_item_source() -> SalesSource:
    return SalesSource(name="sales_by_item.csv", text=SALES_BY_ITEM_CSV)


@pytest.fixture()
def dashboard_source() -> SalesSource:
    return SalesSource(name="dashboard.csv", text=DASHBOARD_CSV)
