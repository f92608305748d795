"""
app/domain package marker.
"""

from app.domain.sales import (
    AggregateResult,
    Alert,
    AlertType,
    AnalysisResult,
    CustomerSales,
    DepartmentSales,
    MonthlySales,
    ProductSales,
    RowValidationError,
    SalesRecord,
    SalesRepPerformance,
    SalesSource,
    SalesSummary,
    WeekdaySales,
)

__all__ = [
    "AggregateResult",
    "Alert",
    "AlertType",
    "AnalysisResult",
    "CustomerSales",
    "DepartmentSales",
    "MonthlySales",
    "ProductSales",
    "RowValidationError",
    "SalesRecord",
    "SalesRepPerformance",
    "SalesSource",
    "SalesSummary",
    "WeekdaySales",
]
