"""
app/schemas package marker.
"""

from app.schemas.analysis import (
    AlertResponse,
    AnalysisResponse,
    CustomerSalesResponse,
    DepartmentSalesResponse,
    ProductSalesResponse,
    SalesRepPerformanceResponse,
    SalesSummaryResponse,
    build_analysis_response,
)

__all__ = [
    "AlertResponse",
    "AnalysisResponse",
    "CustomerSalesResponse",
    "DepartmentSalesResponse",
    "ProductSalesResponse",
    "SalesRepPerformanceResponse",
    "SalesSummaryResponse",
    "build_analysis_response",
]
