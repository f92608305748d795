"""
tests/test_analysis_service.py

Pytest tests for one full analysis pass: ingestion, filtering, every
aggregate view, alerts, insights and summaries.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from alerts.orchestrator import AlertEngine
from app.domain.sales import AlertType, SalesSource
from app.errors import ParseError
from app.services.analysis_service import SalesAnalysisService, run_analysis
from app.services.ingestion_service import SalesIngestionService

NOW = datetime(2024, 8, 1, tzinfo=timezone.utc)


@pytest.fixture()
def service() -> SalesAnalysisService:
    return SalesAnalysisService(
        ingestion=SalesIngestionService(max_workers=1),
        alert_engine=AlertEngine(clock=lambda: NOW),
    )


class TestRunAnalysis:
    def test_full_pass_over_records(self, make_record) -> None:
        records = [
            make_record("Basil", revenue=1000, profit=300, when=date(2024, 1, 10), customer="Acme"),
            make_record(
                "Carrot",
                revenue=1200,
                profit=60,
                when=date(2024, 2, 10),
                customer="Beta",
                total_profit_pct=5.0,
            ),
        ]

        result = run_analysis(records, now=NOW)

        assert result.record_count == 2
        assert result.period == (date(2024, 1, 10), date(2024, 2, 10))
        assert [row.department for row in result.department_sales] == ["Herbs", "Roots"]
        assert [row.customer for row in result.customer_sales] == ["Beta", "Acme"]
        assert result.summary.total_sales == pytest.approx(2200.0)
        assert [alert.type for alert in result.alerts] == [AlertType.WARNING]
        assert "Sales increased 20.0% compared to last month." in result.insights
        assert len(result.weekday_sales) == 7
        assert result.available_months == [(2024, 1), (2024, 2)]

    def test_filters_narrow_views_but_not_available_values(self, make_record) -> None:
        records = [
            make_record("Basil", when=date(2024, 1, 10)),
            make_record("Carrot", when=date(2024, 2, 10)),
        ]

        result = run_analysis(records, department="Roots", year=2024, month=2, now=NOW)

        assert result.record_count == 1
        assert [row.product for row in result.product_sales] == ["Carrot"]
        assert result.month_filter == (2024, 2)
        assert result.department_filter == "Roots"
        assert result.available_departments == ["Herbs", "Roots"]
        assert result.available_months == [(2024, 1), (2024, 2)]

    def test_empty_filter_result_has_no_period(self, make_record) -> None:
        result = run_analysis([make_record("Basil")], department="Dairy", now=NOW)

        assert result.record_count == 0
        assert result.period is None
        assert result.department_sales == []
        assert result.alerts == []
        assert result.insights == []

    def test_empty_dataset(self) -> None:
        result = run_analysis([], now=NOW)
        assert result.period is None
        assert result.summary.total_sales == 0

    @pytest.mark.parametrize(("year", "month"), [(2024, None), (None, 3), (2024, 13)])
    def test_invalid_month_filter_raises(self, make_record, year, month) -> None:
        with pytest.raises(ValueError):
            run_analysis([make_record()], year=year, month=month, now=NOW)

    def test_input_records_are_not_mutated(self, make_record) -> None:
        records = [make_record("Carrot"), make_record("Basil")]
        before = list(records)
        run_analysis(records, department="Herbs", now=NOW)
        assert records == before


class TestSalesAnalysisService:
    def test_analyze_sources_merges_every_source(self, service, sales_by_item_source, dashboard_source) -> None:
        result = service.analyze_sources([sales_by_item_source, dashboard_source])

        assert result.record_count == 4
        assert result.period == (date(2024, 1, 5), date(2024, 2, 1))
        danger = [alert for alert in result.alerts if alert.type == AlertType.DANGER]
        assert danger and danger[0].details == "1 invoices pending payment"

    def test_parse_failure_produces_no_result(self, service, dashboard_source) -> None:
        bad = SalesSource(name="bad.csv", text="date,product\n2024-01-01,Basil\n")
        with pytest.raises(ParseError) as exc_info:
            service.analyze_sources([dashboard_source, bad])
        assert exc_info.value.source == "bad.csv"

    def test_analyze_paths(self, service, tmp_path, dashboard_source) -> None:
        path = tmp_path / "dashboard.csv"
        path.write_text(dashboard_source.text, encoding="utf-8")

        result = service.analyze_paths([path], department="Vegetables")

        assert result.record_count == 1
        assert result.product_sales[0].product == "Red Pepper"

    def test_repeat_passes_are_identical(self, service, sales_by_item_source) -> None:
        first = service.analyze_sources([sales_by_item_source])
        second = service.analyze_sources([sales_by_item_source])
        assert first == second
