"""
app/services/analysis_service.py

Orchestrates one complete analysis pass:

    ingest → merge → filter → aggregate (×4) + alerts + insights + summary

:func:`run_analysis` is the pure core: given a dataset snapshot it
returns a single :class:`~app.domain.sales.AnalysisResult` and touches
nothing else.  Any input change (new files, a different filter) is
handled by calling it again wholesale; results are never patched
incrementally.

:class:`SalesAnalysisService` adds ingestion in front.  An ingestion
failure propagates before any view is computed, so a caller never sees a
result assembled from partially parsed sources.
"""

from __future__ import annotations

import logging
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Mapping, Sequence

from alerts.orchestrator import AlertEngine
from analytics.aggregator import (
    calculate_customer_sales,
    calculate_department_sales,
    calculate_product_sales,
    calculate_sales_rep_performance,
)
from analytics.departments import DepartmentClassifier, get_department_classifier
from analytics.filters import (
    ALL_DEPARTMENTS,
    available_departments,
    available_months,
    filter_by_department,
    filter_by_month,
)
from analytics.summary import monthly_sales, period_range, sales_by_weekday, sales_summary
from app.domain.sales import AnalysisResult, SalesRecord, SalesSource
from app.errors import EmptyDatasetError
from app.logging_utils import log_event
from app.services.ingestion_service import SalesIngestionService, get_ingestion_service
from insights.orchestrator import InsightEngine

logger = logging.getLogger(__name__)


def _validate_month_filter(year: int | None, month: int | None) -> tuple[int, int] | None:
    if year is None and month is None:
        return None
    if year is None or month is None:
        raise ValueError("year and month must be provided together.")
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    return year, month


def run_analysis(
    records: Sequence[SalesRecord],
    *,
    department: str = ALL_DEPARTMENTS,
    year: int | None = None,
    month: int | None = None,
    now: datetime | None = None,
    classifier: DepartmentClassifier | None = None,
    alert_engine: AlertEngine | None = None,
    insight_engine: InsightEngine | None = None,
) -> AnalysisResult:
    """
    Derive every view from one immutable dataset snapshot.

    Parameters
    ----------
    records:
        Merged, date-sorted sales records.
    department:
        Department to keep, or ``"All"``.
    year, month:
        Optional calendar month to keep; both or neither.
    now:
        Evaluation time for time-dependent alert rules.  Defaults to the
        alert engine's clock.
    classifier:
        Department classifier; defaults to the configured one.

    Raises
    ------
    ValueError
        When only one of *year* / *month* is given, or *month* is invalid.
    """
    month_filter = _validate_month_filter(year, month)
    classifier = classifier or get_department_classifier()
    alert_engine = alert_engine or AlertEngine()
    insight_engine = insight_engine or InsightEngine()

    snapshot = tuple(records)
    months = available_months(snapshot)
    departments = available_departments(snapshot, classifier=classifier)

    filtered = filter_by_department(snapshot, department, classifier=classifier)
    if month_filter is not None:
        filtered = filter_by_month(filtered, *month_filter)

    try:
        period = period_range(filtered)
    except EmptyDatasetError:
        logger.info(
            "No records left after filtering department=%r month=%s; period unavailable",
            department,
            month_filter,
        )
        period = None

    result = AnalysisResult(
        record_count=len(filtered),
        period=period,
        department_filter=department,
        month_filter=month_filter,
        summary=sales_summary(filtered),
        department_sales=calculate_department_sales(filtered, classifier=classifier),
        customer_sales=calculate_customer_sales(filtered),
        product_sales=calculate_product_sales(filtered),
        sales_rep_performance=calculate_sales_rep_performance(filtered),
        alerts=alert_engine.generate_alerts(filtered, now=now),
        insights=insight_engine.generate_insights(filtered),
        monthly_sales=monthly_sales(filtered),
        weekday_sales=sales_by_weekday(filtered),
        available_months=months,
        available_departments=departments,
    )
    log_event(
        logger,
        logging.INFO,
        "analysis_pass_complete",
        records=result.record_count,
        department=department,
        month=month_filter,
        alerts=len(result.alerts),
        insights=len(result.insights),
    )
    return result


class SalesAnalysisService:
    """
    Ingests raw sources and runs one analysis pass over the merged data.
    """

    def __init__(
        self,
        *,
        ingestion: SalesIngestionService | None = None,
        classifier: DepartmentClassifier | None = None,
        alert_engine: AlertEngine | None = None,
        insight_engine: InsightEngine | None = None,
    ) -> None:
        self._ingestion = ingestion or get_ingestion_service()
        self._classifier = classifier
        self._alert_engine = alert_engine
        self._insight_engine = insight_engine

    def analyze_sources(
        self,
        sources: Sequence[SalesSource],
        *,
        department: str = ALL_DEPARTMENTS,
        year: int | None = None,
        month: int | None = None,
        now: datetime | None = None,
        manual_mapping: Mapping[str, str] | None = None,
    ) -> AnalysisResult:
        """
        Merge *sources* and analyze them.

        Raises
        ------
        ParseError
            When any source is malformed; no result is produced.
        ValueError
            On an invalid month filter.
        """
        _validate_month_filter(year, month)
        records = self._ingestion.merge_sources(sources, manual_mapping=manual_mapping)
        return run_analysis(
            records,
            department=department,
            year=year,
            month=month,
            now=now,
            classifier=self._classifier,
            alert_engine=self._alert_engine,
            insight_engine=self._insight_engine,
        )

    def analyze_paths(
        self,
        paths: Sequence[str | Path],
        *,
        department: str = ALL_DEPARTMENTS,
        year: int | None = None,
        month: int | None = None,
        now: datetime | None = None,
        manual_mapping: Mapping[str, str] | None = None,
    ) -> AnalysisResult:
        """
        Read the files at *paths* and analyze them.
        """
        sources = self._ingestion.load_paths(paths)
        return self.analyze_sources(
            sources,
            department=department,
            year=year,
            month=month,
            now=now,
            manual_mapping=manual_mapping,
        )

    def decode_source(self, name: str, data: bytes) -> SalesSource:
        return self._ingestion.decode_source(name, data)


@lru_cache(maxsize=1)
def get_analysis_service() -> SalesAnalysisService:
    """
    Return a singleton analysis service using configured defaults.
    """
    return SalesAnalysisService()
