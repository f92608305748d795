"""
app/services package marker.
"""

from app.services.analysis_service import (
    SalesAnalysisService,
    get_analysis_service,
    run_analysis,
)
from app.services.ingestion_service import SalesIngestionService, get_ingestion_service

__all__ = [
    "SalesAnalysisService",
    "get_analysis_service",
    "run_analysis",
    "SalesIngestionService",
    "get_ingestion_service",
]
