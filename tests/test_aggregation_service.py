"""Tests for DeclarationService period aggregation."""

import logging
import sqlite3
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from conftest import (
    TENANT_ID,
    insert_credit_note,
    insert_sales_invoice,
    insert_supplier_invoice,
)

from vat_declaration.config import Settings
from vat_declaration.domain.declaration import DeclarationHeader
from vat_declaration.domain.periods import TaxPeriod
from vat_declaration.exceptions import MalformedRecordError, RecordSourceError
from vat_declaration.repositories.sqlite import SQLiteDatabase, SQLiteTaxLineSource
from vat_declaration.schemas import DocumentRecord, SalesLineRecord
from vat_declaration.services.aggregation import DeclarationService, chunked


class TestChunked:
    def test_splits_into_batches(self):
        ids = [str(i) for i in range(5)]

        assert list(chunked(ids, 2)) == [["0", "1"], ["2", "3"], ["4"]]

    def test_empty_input(self):
        assert list(chunked([], 200)) == []

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError, match="positive"):
            list(chunked(["a"], 0))


class TestAggregatePeriodSQLite:
    def test_sales_and_tax_debtor_purchase(
        self,
        db: SQLiteDatabase,
        source: SQLiteTaxLineSource,
        settings: Settings,
        january: TaxPeriod,
    ):
        insert_sales_invoice(db, [("3.2", "1000.00", "200.00", "20")])
        insert_supplier_invoice(db, [("8b.1", "500.00", "100.00", "20")])

        result = DeclarationService(source, settings).aggregate_period(TENANT_ID, january)

        assert [line.field_code for line in result.output_lines] == ["3.2"]
        assert [line.field_code for line in result.input_lines] == ["8b.1"]
        assert [line.field_code for line in result.reverse_charge_lines] == ["3a.1"]
        assert result.section_totals.s5_7 == Decimal("300")
        assert result.section_totals.s8e_5 == Decimal("100")
        assert result.net_position == Decimal("200")
        assert result.declaration.field_111 == Decimal("200")

    def test_only_declarable_statuses_count(
        self,
        db: SQLiteDatabase,
        source: SQLiteTaxLineSource,
        settings: Settings,
        january: TaxPeriod,
    ):
        insert_sales_invoice(db, [("3.2", "1000", "200", "20")], status="sent")
        insert_sales_invoice(db, [("3.2", "100", "20", "20")], status="paid")
        insert_sales_invoice(db, [("3.2", "999", "199", "20")], status="draft")
        insert_sales_invoice(db, [("3.2", "999", "199", "20")], status="cancelled")
        insert_supplier_invoice(db, [("8a.2", "100", "20", "20")], status="paid")
        insert_supplier_invoice(db, [("8a.2", "999", "199", "20")], status="received")
        insert_supplier_invoice(db, [("8a.2", "999", "199", "20")], status="rejected")

        result = DeclarationService(source, settings).aggregate_period(TENANT_ID, january)

        assert result.output_lines[0].total_base == Decimal("1100")
        assert result.input_lines[0].total_vat == Decimal("20")

    def test_period_and_tenant_filters(
        self,
        db: SQLiteDatabase,
        source: SQLiteTaxLineSource,
        settings: Settings,
        january: TaxPeriod,
    ):
        insert_sales_invoice(db, [("3.2", "100", "20", "20")], vat_date=date(2026, 1, 1))
        insert_sales_invoice(db, [("3.2", "100", "20", "20")], vat_date=date(2026, 1, 31))
        insert_sales_invoice(db, [("3.2", "999", "199", "20")], vat_date=date(2026, 2, 1))
        insert_sales_invoice(db, [("3.2", "999", "199", "20")], tenant_id="other")

        result = DeclarationService(source, settings).aggregate_period(TENANT_ID, january)

        assert result.output_lines[0].total_base == Decimal("200")
        assert result.output_lines[0].entry_count == 2

    def test_legal_entity_filter(
        self,
        db: SQLiteDatabase,
        source: SQLiteTaxLineSource,
        settings: Settings,
        january: TaxPeriod,
    ):
        insert_sales_invoice(db, [("3.2", "100", "20", "20")], legal_entity_id="le-1")
        insert_sales_invoice(db, [("3.2", "500", "100", "20")], legal_entity_id="le-2")
        insert_credit_note(db, "50", "10", "60", legal_entity_id="le-2")
        insert_supplier_invoice(db, [("8a.2", "10", "2", "20")], legal_entity_id="le-2")

        service = DeclarationService(source, settings)
        result = service.aggregate_period(TENANT_ID, january, legal_entity_id="le-1")

        assert result.output_lines[0].total_base == Decimal("100")
        assert result.input_lines == []

    def test_credit_notes_become_negative_sales_lines(
        self,
        db: SQLiteDatabase,
        source: SQLiteTaxLineSource,
        settings: Settings,
        january: TaxPeriod,
    ):
        insert_sales_invoice(db, [("3.2", "1000", "200", "20")])
        insert_credit_note(db, "100", "20", "120", status="posted")
        insert_credit_note(db, "200", "20", "220", status="sent")
        insert_credit_note(db, "999", "99", "1098", status="draft")
        insert_credit_note(db, "999", "99", "1098", issued_at=date(2025, 12, 31))

        result = DeclarationService(source, settings).aggregate_period(TENANT_ID, january)

        by_code = {line.field_code: line for line in result.output_lines}
        assert by_code["3.2"].total_base == Decimal("900")
        assert by_code["3.2"].total_gross == Decimal("1080")
        assert by_code["3.3"].total_base == Decimal("-200")
        assert by_code["3.3"].total_vat == Decimal("-20")

    def test_lines_without_field_code_are_excluded(
        self,
        db: SQLiteDatabase,
        source: SQLiteTaxLineSource,
        settings: Settings,
        january: TaxPeriod,
    ):
        insert_sales_invoice(
            db, [("3.2", "100", "20", "20"), (None, "5000", "1000", "20")]
        )

        result = DeclarationService(source, settings).aggregate_period(TENANT_ID, january)

        assert len(result.output_lines) == 1
        assert result.output_lines[0].total_base == Decimal("100")

    def test_chunked_fetch_gives_same_result(
        self,
        db: SQLiteDatabase,
        source: SQLiteTaxLineSource,
        january: TaxPeriod,
    ):
        for i in range(7):
            insert_sales_invoice(db, [("3.2", f"{100 + i}", f"{20 + i}", "20")])
            insert_supplier_invoice(db, [("8g.1", f"{10 + i}", "2", "20")])

        small = DeclarationService(source, Settings(fetch_chunk_size=3))
        large = DeclarationService(source, Settings(fetch_chunk_size=200))

        assert small.aggregate_period(TENANT_ID, january) == large.aggregate_period(
            TENANT_ID, january
        )

    def test_empty_period(self, source: SQLiteTaxLineSource, settings: Settings):
        result = DeclarationService(source, settings).aggregate_period(
            TENANT_ID, TaxPeriod.monthly(2030, 6)
        )

        assert result.output_lines == []
        assert result.input_lines == []
        assert result.reverse_charge_lines == []
        assert result.net_position == Decimal("0")

    def test_render(
        self,
        db: SQLiteDatabase,
        source: SQLiteTaxLineSource,
        settings: Settings,
        january: TaxPeriod,
    ):
        insert_sales_invoice(db, [("3.2", "1000", "200", "20")])
        service = DeclarationService(source, settings)
        result = service.aggregate_period(TENANT_ID, january)

        xml = service.render(
            result, DeclarationHeader.for_period("101234567", "Acme", january)
        )

        assert "<Polje105>200.00</Polje105>" in xml
        assert "<Polje111>200.00</Polje111>" in xml


def _mock_source() -> MagicMock:
    source = MagicMock()
    source.list_sales_documents.return_value = []
    source.list_credit_notes.return_value = []
    source.list_purchase_documents.return_value = []
    source.list_sales_lines.return_value = []
    source.list_purchase_lines.return_value = []
    return source


class TestAggregatePeriodCollaborator:
    def test_line_queries_are_chunked(self, january: TaxPeriod):
        source = _mock_source()
        source.list_sales_documents.return_value = [
            DocumentRecord(id=f"inv-{i}", status="posted", vat_date=date(2026, 1, 5))
            for i in range(5)
        ]
        source.list_sales_lines.side_effect = lambda ids: [
            SalesLineRecord(source_id=doc_id, field_code="3.2", rate="20", base="10", tax="2")
            for doc_id in ids
        ]

        service = DeclarationService(source, Settings(fetch_chunk_size=2))
        result = service.aggregate_period(TENANT_ID, january)

        batches = [call.args[0] for call in source.list_sales_lines.call_args_list]
        assert [len(batch) for batch in batches] == [2, 2, 1]
        assert result.output_lines[0].total_base == Decimal("50")
        source.list_purchase_lines.assert_not_called()

    def test_declarable_statuses_are_requested(self, january: TaxPeriod):
        source = _mock_source()

        DeclarationService(source, Settings()).aggregate_period(
            TENANT_ID, january, legal_entity_id="le-1"
        )

        source.list_sales_documents.assert_called_once_with(
            TENANT_ID, january.start, january.end, ["sent", "paid", "posted"], "le-1"
        )
        source.list_credit_notes.assert_called_once_with(
            TENANT_ID, january.start, january.end, ["posted", "sent", "approved"], "le-1"
        )
        source.list_purchase_documents.assert_called_once_with(
            TENANT_ID, january.start, january.end, ["approved", "paid", "posted"], "le-1"
        )

    def test_source_failure_is_wrapped(self, january: TaxPeriod):
        source = _mock_source()
        source.list_purchase_documents.side_effect = sqlite3.OperationalError(
            "database is locked"
        )

        service = DeclarationService(source, Settings())

        with pytest.raises(RecordSourceError, match="database is locked") as exc_info:
            service.aggregate_period(TENANT_ID, january)

        assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)
        assert exc_info.value.context["tenant_id"] == TENANT_ID
        assert exc_info.value.status_code == 502

    def test_engine_errors_pass_through(self, january: TaxPeriod):
        source = _mock_source()
        source.list_sales_documents.side_effect = MalformedRecordError(
            "invoices", "inv-1", "bad vat_date"
        )

        with pytest.raises(MalformedRecordError):
            DeclarationService(source, Settings()).aggregate_period(TENANT_ID, january)

    def test_malformed_row_from_sqlite(
        self,
        db: SQLiteDatabase,
        source: SQLiteTaxLineSource,
        settings: Settings,
        january: TaxPeriod,
    ):
        insert_sales_invoice(db, [("3.2", "not-a-number", "20", "20")])

        with pytest.raises(RecordSourceError) as exc_info:
            DeclarationService(source, settings).aggregate_period(TENANT_ID, january)

        assert exc_info.value.error_code == "MALFORMED_RECORD"


class TestAggregatePeriodLogging:
    def test_logs_period_aggregated(self, capsys, caplog, january: TaxPeriod):
        service = DeclarationService(_mock_source(), Settings())

        with caplog.at_level(logging.INFO, logger="vat_declaration.services.aggregation"):
            service.aggregate_period(TENANT_ID, january)

        # Structlog can output to stdout directly OR through Python's logging
        all_output = capsys.readouterr().out + caplog.text
        assert "period_aggregated" in all_output

    def test_logs_record_source_failed(self, capsys, caplog, january: TaxPeriod):
        source = _mock_source()
        source.list_sales_documents.side_effect = RuntimeError("connection reset")
        service = DeclarationService(source, Settings())

        with caplog.at_level(logging.ERROR, logger="vat_declaration.services.aggregation"):
            with pytest.raises(RecordSourceError):
                service.aggregate_period(TENANT_ID, january)

        all_output = capsys.readouterr().out + caplog.text
        assert "record_source_failed" in all_output
