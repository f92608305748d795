"""
app/schemas/analysis.py

Response schemas for the sales analysis endpoint and CLI output.
"""

from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.domain.sales import AnalysisResult


class _FrozenModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class DepartmentSalesResponse(_FrozenModel):
    department: str
    total_sales: float
    total_profit: float
    profit_margin: float
    order_count: int = Field(..., ge=0)


class CustomerSalesResponse(_FrozenModel):
    customer: str
    total_sales: float
    total_profit: float
    profit_margin: float
    order_count: int = Field(..., ge=0)


class ProductSalesResponse(_FrozenModel):
    product: str
    total_sales: float
    total_profit: float
    profit_margin: float
    units_sold: float


class SalesRepPerformanceResponse(_FrozenModel):
    name: str
    total_sales: float
    total_profit: float
    profit_margin: float
    customer_count: int = Field(..., ge=0)
    order_count: int = Field(..., ge=0)


class AlertResponse(_FrozenModel):
    type: Literal["warning", "danger"]
    message: str
    details: str


class SalesSummaryResponse(_FrozenModel):
    total_sales: float
    total_profit: float
    profit_margin: float
    record_count: int = Field(..., ge=0)


class MonthlySalesResponse(_FrozenModel):
    year: int
    month: int = Field(..., ge=1, le=12)
    total_sales: float
    total_profit: float
    profit_margin: float
    record_count: int = Field(..., ge=0)


class WeekdaySalesResponse(_FrozenModel):
    weekday: str
    total_sales: float


class PeriodResponse(_FrozenModel):
    start: date
    end: date


class MonthFilterResponse(_FrozenModel):
    year: int
    month: int = Field(..., ge=1, le=12)


class AnalysisResponse(_FrozenModel):
    """
    API response model for one complete analysis pass.

    ``period`` is ``null`` when no record survives the filters.
    """

    record_count: int = Field(..., ge=0)
    period: PeriodResponse | None = None
    department_filter: str
    month_filter: MonthFilterResponse | None = None
    summary: SalesSummaryResponse
    department_sales: list[DepartmentSalesResponse] = Field(default_factory=list)
    customer_sales: list[CustomerSalesResponse] = Field(default_factory=list)
    product_sales: list[ProductSalesResponse] = Field(default_factory=list)
    sales_rep_performance: list[SalesRepPerformanceResponse] = Field(default_factory=list)
    alerts: list[AlertResponse] = Field(default_factory=list)
    insights: list[str] = Field(default_factory=list)
    monthly_sales: list[MonthlySalesResponse] = Field(default_factory=list)
    weekday_sales: list[WeekdaySalesResponse] = Field(default_factory=list)
    available_months: list[MonthFilterResponse] = Field(default_factory=list)
    available_departments: list[str] = Field(default_factory=list)


def build_analysis_response(result: AnalysisResult) -> AnalysisResponse:
    """
    Convert a domain :class:`AnalysisResult` into its response model.
    """

    period = None
    if result.period is not None:
        period = PeriodResponse(start=result.period[0], end=result.period[1])

    month_filter = None
    if result.month_filter is not None:
        month_filter = MonthFilterResponse(year=result.month_filter[0], month=result.month_filter[1])

    return AnalysisResponse(
        record_count=result.record_count,
        period=period,
        department_filter=result.department_filter,
        month_filter=month_filter,
        summary=SalesSummaryResponse(
            total_sales=result.summary.total_sales,
            total_profit=result.summary.total_profit,
            profit_margin=result.summary.profit_margin,
            record_count=result.summary.record_count,
        ),
        department_sales=[
            DepartmentSalesResponse(
                department=row.department,
                total_sales=row.total_sales,
                total_profit=row.total_profit,
                profit_margin=row.profit_margin,
                order_count=row.order_count,
            )
            for row in result.department_sales
        ],
        customer_sales=[
            CustomerSalesResponse(
                customer=row.customer,
                total_sales=row.total_sales,
                total_profit=row.total_profit,
                profit_margin=row.profit_margin,
                order_count=row.order_count,
            )
            for row in result.customer_sales
        ],
        product_sales=[
            ProductSalesResponse(
                product=row.product,
                total_sales=row.total_sales,
                total_profit=row.total_profit,
                profit_margin=row.profit_margin,
                units_sold=row.units_sold,
            )
            for row in result.product_sales
        ],
        sales_rep_performance=[
            SalesRepPerformanceResponse(
                name=row.name,
                total_sales=row.total_sales,
                total_profit=row.total_profit,
                profit_margin=row.profit_margin,
                customer_count=row.customer_count,
                order_count=row.order_count,
            )
            for row in result.sales_rep_performance
        ],
        alerts=[
            AlertResponse(type=alert.type, message=alert.message, details=alert.details)
            for alert in result.alerts
        ],
        insights=list(result.insights),
        monthly_sales=[
            MonthlySalesResponse(
                year=row.year,
                month=row.month,
                total_sales=row.total_sales,
                total_profit=row.total_profit,
                profit_margin=row.profit_margin,
                record_count=row.record_count,
            )
            for row in result.monthly_sales
        ],
        weekday_sales=[
            WeekdaySalesResponse(weekday=row.weekday, total_sales=row.total_sales)
            for row in result.weekday_sales
        ],
        available_months=[
            MonthFilterResponse(year=year, month=month) for year, month in result.available_months
        ],
        available_departments=list(result.available_departments),
    )
