"""
app/domain/sales.py

Value objects for one analysis pass: the ingested sales record, the
per-dimension aggregate rows, alerts, and supplementary summaries.

Every type here is a frozen dataclass with no behavior beyond trivial
read-only properties.  Instances are created once per pass and never
mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Literal, Union


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SalesSource:
    """
    One raw delimited-text export, identified by name.
    """

    name: str
    text: str


@dataclass(frozen=True)
class SalesRecord:
    """
    One transaction line with strongly-typed fields.

    ``total_revenue`` and ``total_profit`` are trusted as already-reduced
    per-line values; nothing downstream recomputes them from unit price
    and quantity.
    """

    product: str
    transaction_date: date
    total_revenue: float
    total_profit: float
    customer: str | None = None
    sales_rep: str | None = None
    quantity: float | None = None
    unit_cost: float | None = None
    unit_price: float | None = None
    total_profit_pct: float | None = None
    payment_status: str | None = None
    requested_date: date | None = None
    source: str | None = None


@dataclass(frozen=True)
class RowValidationError:
    """
    One source row validation error detail.
    """

    row_number: int
    message: str
    column: str | None = None
    value: str | None = None


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DepartmentSales:
    department: str
    total_sales: float
    total_profit: float
    profit_margin: float
    order_count: int

    @property
    def key(self) -> str:
        return self.department


@dataclass(frozen=True)
class CustomerSales:
    customer: str
    total_sales: float
    total_profit: float
    profit_margin: float
    order_count: int

    @property
    def key(self) -> str:
        return self.customer


@dataclass(frozen=True)
class ProductSales:
    product: str
    total_sales: float
    total_profit: float
    profit_margin: float
    units_sold: float

    @property
    def key(self) -> str:
        return self.product


@dataclass(frozen=True)
class SalesRepPerformance:
    """
    ``customer_count`` is the number of distinct customer names served.
    """

    name: str
    total_sales: float
    total_profit: float
    profit_margin: float
    customer_count: int
    order_count: int

    @property
    def key(self) -> str:
        return self.name


AggregateResult = Union[DepartmentSales, CustomerSales, ProductSales, SalesRepPerformance]


# ---------------------------------------------------------------------------
# Alerts
# ---------------------------------------------------------------------------


class AlertType:
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True)
class Alert:
    type: Literal["warning", "danger"]
    message: str
    details: str


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SalesSummary:
    """
    Headline totals for a dataset; ``profit_margin`` is a ratio of sums.
    """

    total_sales: float
    total_profit: float
    profit_margin: float
    record_count: int


@dataclass(frozen=True)
class MonthlySales:
    year: int
    month: int
    total_sales: float
    total_profit: float
    profit_margin: float
    record_count: int


@dataclass(frozen=True)
class WeekdaySales:
    weekday: str
    total_sales: float


@dataclass(frozen=True)
class AnalysisResult:
    """
    Everything one analysis pass produces, published only once complete.

    ``period`` is ``None`` when the filtered dataset is empty.
    ``available_months`` and ``available_departments`` describe the
    unfiltered dataset so a caller can offer the next filter choice.
    """

    record_count: int
    period: tuple[date, date] | None
    department_filter: str
    month_filter: tuple[int, int] | None
    summary: SalesSummary
    department_sales: list[DepartmentSales] = field(default_factory=list)
    customer_sales: list[CustomerSales] = field(default_factory=list)
    product_sales: list[ProductSales] = field(default_factory=list)
    sales_rep_performance: list[SalesRepPerformance] = field(default_factory=list)
    alerts: list[Alert] = field(default_factory=list)
    insights: list[str] = field(default_factory=list)
    monthly_sales: list[MonthlySales] = field(default_factory=list)
    weekday_sales: list[WeekdaySales] = field(default_factory=list)
    available_months: list[tuple[int, int]] = field(default_factory=list)
    available_departments: list[str] = field(default_factory=list)
