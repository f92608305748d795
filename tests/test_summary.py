from __future__ import annotations

from datetime import date

import pytest

from analytics.formulas import percent_change, profit_margin, safe_ratio
from analytics.summary import WEEKDAYS, monthly_sales, period_range, sales_by_weekday, sales_summary
from app.errors import EmptyDatasetError


class TestFormulas:
    def test_profit_margin(self) -> None:
        assert profit_margin(25.0, 200.0) == pytest.approx(12.5)

    def test_zero_denominators_resolve_to_zero(self) -> None:
        assert safe_ratio(5.0, 0.0) == 0.0
        assert profit_margin(5.0, 0.0) == 0.0
        assert percent_change(5.0, 0.0) == 0.0

    def test_percent_change(self) -> None:
        assert percent_change(1200.0, 1000.0) == pytest.approx(20.0)
        assert percent_change(800.0, 1000.0) == pytest.approx(-20.0)


class TestPeriodRange:
    def test_earliest_and_latest(self, make_record) -> None:
        records = [
            make_record(when=date(2024, 3, 1)),
            make_record(when=date(2023, 11, 2)),
            make_record(when=date(2024, 1, 1)),
        ]
        assert period_range(records) == (date(2023, 11, 2), date(2024, 3, 1))

    def test_empty_dataset_raises(self) -> None:
        with pytest.raises(EmptyDatasetError):
            period_range([])


class TestSalesSummary:
    def test_totals_and_ratio_of_sums(self, make_record) -> None:
        records = [make_record(revenue=100, profit=50), make_record(revenue=300, profit=10)]

        summary = sales_summary(records)

        assert summary.total_sales == pytest.approx(400.0)
        assert summary.total_profit == pytest.approx(60.0)
        assert summary.profit_margin == pytest.approx(15.0)
        assert summary.record_count == 2

    def test_empty_summary_is_zero(self) -> None:
        summary = sales_summary([])
        assert (summary.total_sales, summary.profit_margin, summary.record_count) == (0, 0.0, 0)


class TestBreakdowns:
    def test_monthly_sales_are_chronological(self, make_record) -> None:
        records = [
            make_record(revenue=10, profit=1, when=date(2024, 2, 3)),
            make_record(revenue=30, profit=3, when=date(2023, 12, 9)),
            make_record(revenue=20, profit=4, when=date(2024, 2, 28)),
        ]

        months = monthly_sales(records)

        assert [(m.year, m.month) for m in months] == [(2023, 12), (2024, 2)]
        assert months[1].total_sales == pytest.approx(30.0)
        assert months[1].profit_margin == pytest.approx(100 * 5 / 30)
        assert months[1].record_count == 2

    def test_weekday_sales_always_has_seven_rows(self, make_record) -> None:
        # 2024-01-07 is a Sunday, 2024-01-08 a Monday.
        records = [
            make_record(revenue=5, when=date(2024, 1, 7)),
            make_record(revenue=7, when=date(2024, 1, 8)),
            make_record(revenue=1, when=date(2024, 1, 14)),
        ]

        rows = sales_by_weekday(records)

        assert [row.weekday for row in rows] == list(WEEKDAYS)
        assert rows[0].total_sales == pytest.approx(6.0)
        assert rows[1].total_sales == pytest.approx(7.0)
        assert rows[6].total_sales == 0.0
