"""
app/api/routers/analysis_router.py

Sales analysis HTTP endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, status

from app.api.dependencies import get_csv_uploads
from app.errors import ParseError
from app.schemas.analysis import AnalysisResponse, build_analysis_response
from app.services.analysis_service import SalesAnalysisService, get_analysis_service

router = APIRouter(tags=["analysis"])


@router.post("/analyze", response_model=AnalysisResponse)
def analyze_sales(
    files: list[UploadFile] = Depends(get_csv_uploads),
    department: str = Query(default="All", description="Department to keep, or 'All'"),
    year: int | None = Query(default=None, description="Calendar year of the month filter"),
    month: int | None = Query(default=None, ge=1, le=12, description="Month of the month filter"),
    analysis_service: SalesAnalysisService = Depends(get_analysis_service),
) -> AnalysisResponse:
    """
    Merge the uploaded CSV exports and run one analysis pass over them.
    """

    if (year is None) != (month is None):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="year and month must be provided together.",
        )

    try:
        sources = [
            analysis_service.decode_source(file.filename or f"upload-{index}", file.file.read())
            for index, file in enumerate(files, start=1)
        ]
        result = analysis_service.analyze_sources(
            sources,
            department=department,
            year=year,
            month=month,
        )
    except ParseError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_dict(),
        ) from exc
    finally:
        for file in files:
            file.file.close()

    return build_analysis_response(result)
