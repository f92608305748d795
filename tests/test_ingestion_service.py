"""
tests/test_ingestion_service.py

Pytest unit tests for SalesIngestionService.

Coverage
--------
- Header-driven parsing of both export shapes
- Merge ordering across sources
- Empty and header-only sources
- Malformed sources: arity, missing columns, bad numbers, bad dates
- Decoding and path loading
"""

from __future__ import annotations

from datetime import date

import pytest

from app.domain.sales import SalesSource
from app.errors import CoercionError, ParseError
from app.services.ingestion_service import SalesIngestionService


@pytest.fixture()
def svc() -> SalesIngestionService:
    return SalesIngestionService(max_workers=2)


def _source(text: str, name: str = "upload.csv") -> SalesSource:
    return SalesSource(name=name, text=text)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParseSource:
    def test_sales_by_item_rows_parse_in_row_order(self, svc, sales_by_item_source) -> None:
        records = svc.parse_source(sales_by_item_source)

        assert [r.product for r in records] == ["Basil", "Carrot"]
        basil, carrot = records
        assert basil.customer == "Acme"
        assert basil.sales_rep == "Dana"
        assert basil.quantity == pytest.approx(10.0)
        assert basil.total_profit_pct == pytest.approx(50.0)
        assert carrot.total_revenue == pytest.approx(6000.0)
        assert carrot.total_profit == pytest.approx(1000.0)
        assert carrot.unit_cost == pytest.approx(1000.0)
        assert carrot.payment_status == "Unpaid"
        assert carrot.source == "sales_by_item.csv"

    def test_transaction_date_comes_from_requested_date(self, svc, sales_by_item_source) -> None:
        basil = svc.parse_source(sales_by_item_source)[0]
        assert basil.transaction_date == date(2024, 1, 10)
        assert basil.requested_date == date(2024, 1, 10)

    def test_dashboard_shape_leaves_optional_fields_empty(self, svc, dashboard_source) -> None:
        kale = svc.parse_source(dashboard_source)[0]
        assert kale.product == "Kale"
        assert kale.customer is None
        assert kale.quantity is None
        assert kale.total_profit_pct is None

    def test_empty_source_yields_no_records(self, svc) -> None:
        assert svc.parse_source(_source("")) == []
        assert svc.parse_source(_source("  \n\n")) == []

    def test_header_only_source_yields_no_records(self, svc) -> None:
        assert svc.parse_source(_source("date,product,sales,profit\n")) == []

    def test_blank_lines_are_skipped(self, svc) -> None:
        text = "\n" "date,product,sales,profit\n" "\n" "2024-01-01,Basil,10,2\n" ",,,\n"
        records = svc.parse_source(_source(text))
        assert len(records) == 1

    def test_byte_order_mark_is_ignored(self, svc, dashboard_source) -> None:
        records = svc.parse_source(_source("\ufeff" + dashboard_source.text))
        assert len(records) == 2

    def test_blank_header_columns_are_ignored(self, svc) -> None:
        text = "date,product,sales,profit,\n2024-01-01,Basil,10,2,leftover\n"
        records = svc.parse_source(_source(text))
        assert records[0].total_revenue == pytest.approx(10.0)

    def test_manual_mapping_is_applied(self, svc) -> None:
        text = "When,Item,Gross,Net\n2024-01-01,Basil,10,2\n"
        records = svc.parse_source(
            _source(text),
            manual_mapping={
                "transaction_date": "When",
                "product": "Item",
                "total_revenue": "Gross",
                "total_profit": "Net",
            },
        )
        assert records[0].product == "Basil"
        assert records[0].total_profit == pytest.approx(2.0)


class TestMalformedSources:
    def test_arity_mismatch_names_source_and_row(self, svc) -> None:
        text = "date,product,sales,profit\n2024-01-01,Basil,10,2\n2024-01-02,Carrot,5\n"
        with pytest.raises(ParseError) as exc_info:
            svc.parse_source(_source(text, name="short.csv"))
        assert exc_info.value.source == "short.csv"
        assert exc_info.value.row_number == 3

    def test_missing_required_column(self, svc) -> None:
        with pytest.raises(ParseError) as exc_info:
            svc.parse_source(_source("date,product,sales\n2024-01-01,Basil,10\n"))
        columns = {error.column for error in exc_info.value.errors}
        assert "total_profit" in columns

    def test_duplicate_header_names(self, svc) -> None:
        with pytest.raises(ParseError, match="duplicate"):
            svc.parse_source(_source("date,product,sales,sales\n2024-01-01,Basil,1,2\n"))

    def test_unconvertible_number_raises_coercion_error(self, svc) -> None:
        text = "date,product,sales,profit\n2024-01-01,Basil,lots,2\n"
        with pytest.raises(CoercionError) as exc_info:
            svc.parse_source(_source(text))
        assert exc_info.value.field == "total_revenue"
        assert exc_info.value.row_number == 2

    def test_invalid_date_raises_parse_error(self, svc) -> None:
        text = "date,product,sales,profit\nsoon,Basil,10,2\n"
        with pytest.raises(ParseError) as exc_info:
            svc.parse_source(_source(text))
        assert not isinstance(exc_info.value, CoercionError)
        assert exc_info.value.errors[0].column == "transaction_date"

    def test_missing_required_value(self, svc) -> None:
        text = "date,product,sales,profit\n2024-01-01,,10,2\n"
        with pytest.raises(ParseError) as exc_info:
            svc.parse_source(_source(text))
        assert exc_info.value.errors[0].message == "Required value is missing."

    def test_blank_requested_date_fails_sales_by_item_source(self, svc, sales_by_item_source) -> None:
        text = sales_by_item_source.text.replace(",Paid,2024-01-10\n", ",Paid,\n")
        with pytest.raises(ParseError) as exc_info:
            svc.parse_source(_source(text, name="sales_by_item.csv"))
        first = exc_info.value.errors[0]
        assert exc_info.value.source == "sales_by_item.csv"
        assert first.row_number == 2
        assert first.column == "transaction_date"
        assert first.message == "Required value is missing."

    def test_negative_quantity_is_rejected(self, svc) -> None:
        text = "date,product,qty,sales,profit\n2024-01-01,Basil,-3,10,2\n"
        with pytest.raises(ParseError) as exc_info:
            svc.parse_source(_source(text))
        assert exc_info.value.errors[0].column == "quantity"


# ---------------------------------------------------------------------------
# Merging
# ---------------------------------------------------------------------------


class TestMergeSources:
    def test_merged_records_are_sorted_by_date(self, svc, sales_by_item_source, dashboard_source) -> None:
        merged = svc.merge_sources([sales_by_item_source, dashboard_source])

        dates = [r.transaction_date for r in merged]
        assert dates == sorted(dates)
        assert len(merged) == 4

    def test_source_order_does_not_change_date_ordering(self, svc) -> None:
        later = _source("date,product,sales,profit\n2024-02-10,Red Pepper,5,1\n", name="b.csv")
        earlier = _source("date,product,sales,profit\n2024-01-10,Genovese Basil,7,2\n", name="a.csv")

        forward = svc.merge_sources([earlier, later])
        backward = svc.merge_sources([later, earlier])

        for merged in (forward, backward):
            dates = [r.transaction_date for r in merged]
            assert dates == sorted(dates)
            assert [r.product for r in merged] == ["Genovese Basil", "Red Pepper"]
        assert set(forward) == set(backward)

    def test_same_date_keeps_source_order(self, svc) -> None:
        first = _source("date,product,sales,profit\n2024-01-01,Basil,1,0\n", name="a.csv")
        second = _source("date,product,sales,profit\n2024-01-01,Carrot,1,0\n", name="b.csv")

        merged = svc.merge_sources([first, second])

        assert [r.product for r in merged] == ["Basil", "Carrot"]

    def test_one_bad_source_fails_the_whole_merge(self, svc, dashboard_source) -> None:
        bad = _source("date,product,sales,profit\n2024-01-01,Basil,ten,2\n", name="bad.csv")
        with pytest.raises(ParseError) as exc_info:
            svc.merge_sources([dashboard_source, bad])
        assert exc_info.value.source == "bad.csv"


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


class TestReading:
    def test_decode_rejects_invalid_bytes(self, svc) -> None:
        with pytest.raises(ParseError) as exc_info:
            svc.decode_source("binary.csv", b"\xff\xfe\x00\x81")
        assert exc_info.value.source == "binary.csv"

    def test_load_paths_preserves_argument_order(self, svc, tmp_path, sales_by_item_source, dashboard_source) -> None:
        first = tmp_path / "first.csv"
        second = tmp_path / "second.csv"
        first.write_text(sales_by_item_source.text, encoding="utf-8")
        second.write_text(dashboard_source.text, encoding="utf-8")

        sources = svc.load_paths([second, first])

        assert [s.name for s in sources] == [str(second), str(first)]
        assert sources[1].text == sales_by_item_source.text

    def test_missing_path_raises_parse_error(self, svc, tmp_path) -> None:
        with pytest.raises(ParseError):
            svc.load_paths([tmp_path / "absent.csv"])
