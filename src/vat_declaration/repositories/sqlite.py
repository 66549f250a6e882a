"""SQLite implementations of repository interfaces."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from uuid import UUID

from vat_declaration.config import Settings, get_settings
from vat_declaration.domain.reverse_charge import ReverseChargeLedgerEntry
from vat_declaration.repositories.interfaces import (
    ReverseChargeEntryRepository,
    TaxLineSource,
)
from vat_declaration.schemas import (
    CreditNoteRecord,
    DocumentRecord,
    PurchaseLineRecord,
    SalesLineRecord,
    parse_records,
)


class SQLiteDatabase:
    """SQLite database connection manager."""

    def __init__(
        self, path: str | Path = ":memory:", check_same_thread: bool = True
    ) -> None:
        self._path = str(path)
        self._check_same_thread = check_same_thread
        self._connection: sqlite3.Connection | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> SQLiteDatabase:
        """Open the reference record store at the configured sqlite_path."""
        settings = settings or get_settings()
        return cls(settings.sqlite_path)

    @property
    def path(self) -> str:
        return self._path

    def get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._connection is None:
            self._connection = sqlite3.connect(
                self._path, check_same_thread=self._check_same_thread
            )
            self._connection.row_factory = sqlite3.Row
            self._connection.execute("PRAGMA foreign_keys = ON")
        return self._connection

    def initialize(self) -> None:
        """Create all database tables."""
        conn = self.get_connection()
        conn.executescript(
            """
            -- Sales invoices
            CREATE TABLE IF NOT EXISTS invoices (
                id TEXT PRIMARY KEY,
                tenant_id TEXT NOT NULL,
                legal_entity_id TEXT,
                status TEXT NOT NULL,
                vat_date TEXT NOT NULL
            );
            CREATE INDEX IF NOT EXISTS idx_invoices_period ON invoices(tenant_id, vat_date);

            CREATE TABLE IF NOT EXISTS invoice_lines (
                id TEXT PRIMARY KEY,
                invoice_id TEXT NOT NULL,
                line_total TEXT,
                tax_amount TEXT,
                tax_rate_value TEXT,
                popdv_field TEXT,
                total_with_tax TEXT,
                vat_non_deductible TEXT,
                sort_order INTEGER NOT NULL DEFAULT 0,
                FOREIGN KEY (invoice_id) REFERENCES invoices(id) ON DELETE CASCADE
            );
            CREATE INDEX IF NOT EXISTS idx_invoice_lines_invoice ON invoice_lines(invoice_id);

            -- Credit notes
            CREATE TABLE IF NOT EXISTS credit_notes (
                id TEXT PRIMARY KEY,
                tenant_id TEXT NOT NULL,
                legal_entity_id TEXT,
                status TEXT NOT NULL,
                issued_at TEXT NOT NULL,
                subtotal TEXT,
                tax_amount TEXT,
                amount TEXT
            );
            CREATE INDEX IF NOT EXISTS idx_credit_notes_period ON credit_notes(tenant_id, issued_at);

            -- Supplier invoices
            CREATE TABLE IF NOT EXISTS supplier_invoices (
                id TEXT PRIMARY KEY,
                tenant_id TEXT NOT NULL,
                legal_entity_id TEXT,
                status TEXT NOT NULL,
                vat_date TEXT NOT NULL
            );
            CREATE INDEX IF NOT EXISTS idx_supplier_invoices_period ON supplier_invoices(tenant_id, vat_date);

            CREATE TABLE IF NOT EXISTS supplier_invoice_lines (
                id TEXT PRIMARY KEY,
                supplier_invoice_id TEXT NOT NULL,
                line_total TEXT,
                tax_amount TEXT,
                tax_rate_value TEXT,
                popdv_field TEXT,
                total_with_tax TEXT,
                vat_non_deductible TEXT,
                fee_value TEXT,
                sort_order INTEGER NOT NULL DEFAULT 0,
                FOREIGN KEY (supplier_invoice_id) REFERENCES supplier_invoices(id) ON DELETE CASCADE
            );
            CREATE INDEX IF NOT EXISTS idx_supplier_invoice_lines_invoice ON supplier_invoice_lines(supplier_invoice_id);

            -- Reverse-charge ledger
            CREATE TABLE IF NOT EXISTS reverse_charge_entries (
                id TEXT PRIMARY KEY,
                tenant_id TEXT NOT NULL,
                supplier_invoice_id TEXT NOT NULL,
                supplier_invoice_line_id TEXT NOT NULL,
                input_popdv_field TEXT NOT NULL,
                output_popdv_field TEXT NOT NULL,
                base_amount TEXT NOT NULL,
                vat_amount TEXT NOT NULL,
                vat_date TEXT NOT NULL,
                created_at TEXT NOT NULL
            );
            CREATE INDEX IF NOT EXISTS idx_reverse_charge_entries_document ON reverse_charge_entries(supplier_invoice_id);
            CREATE INDEX IF NOT EXISTS idx_reverse_charge_entries_period ON reverse_charge_entries(tenant_id, vat_date);
            """
        )
        conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None


def _placeholders(values: Sequence[object]) -> str:
    return ", ".join("?" for _ in values)


class SQLiteTaxLineSource(TaxLineSource):
    """SQLite implementation of TaxLineSource."""

    def __init__(self, database: SQLiteDatabase) -> None:
        self._db = database

    def list_sales_documents(
        self,
        tenant_id: str,
        start_date: date,
        end_date: date,
        statuses: Sequence[str],
        legal_entity_id: str | None = None,
    ) -> Iterable[DocumentRecord]:
        return self._list_documents(
            "invoices", tenant_id, start_date, end_date, statuses, legal_entity_id
        )

    def list_sales_lines(self, document_ids: Sequence[str]) -> Iterable[SalesLineRecord]:
        if not document_ids:
            return []
        conn = self._db.get_connection()
        rows = conn.execute(
            f"""
            SELECT invoice_id AS source_id, id AS line_id, popdv_field AS field_code,
                   tax_rate_value AS rate, line_total AS base, tax_amount AS tax,
                   total_with_tax AS gross, vat_non_deductible AS non_deductible
            FROM invoice_lines
            WHERE invoice_id IN ({_placeholders(document_ids)})
              AND popdv_field IS NOT NULL
            ORDER BY invoice_id, sort_order
            """,
            list(document_ids),
        ).fetchall()
        return parse_records(SalesLineRecord, rows, "sales line")

    def list_credit_notes(
        self,
        tenant_id: str,
        start_date: date,
        end_date: date,
        statuses: Sequence[str],
        legal_entity_id: str | None = None,
    ) -> Iterable[CreditNoteRecord]:
        if not statuses:
            return []
        conn = self._db.get_connection()
        query = f"""
            SELECT id AS source_id, issued_at, subtotal, tax_amount, amount AS total
            FROM credit_notes
            WHERE tenant_id = ?
              AND status IN ({_placeholders(statuses)})
              AND issued_at >= ? AND issued_at <= ?
        """
        params: list[str] = [tenant_id, *statuses]
        params += [start_date.isoformat(), end_date.isoformat()]
        if legal_entity_id is not None:
            query += " AND legal_entity_id = ?"
            params.append(legal_entity_id)
        query += " ORDER BY issued_at, id"
        rows = conn.execute(query, params).fetchall()
        return parse_records(CreditNoteRecord, rows, "credit note")

    def list_purchase_documents(
        self,
        tenant_id: str,
        start_date: date,
        end_date: date,
        statuses: Sequence[str],
        legal_entity_id: str | None = None,
    ) -> Iterable[DocumentRecord]:
        return self._list_documents(
            "supplier_invoices",
            tenant_id,
            start_date,
            end_date,
            statuses,
            legal_entity_id,
        )

    def list_purchase_lines(
        self, document_ids: Sequence[str]
    ) -> Iterable[PurchaseLineRecord]:
        if not document_ids:
            return []
        conn = self._db.get_connection()
        rows = conn.execute(
            f"""
            SELECT supplier_invoice_id AS source_id, id AS line_id,
                   popdv_field AS field_code, tax_rate_value AS rate,
                   line_total AS base, tax_amount AS tax, total_with_tax AS gross,
                   vat_non_deductible AS non_deductible, fee_value AS fee
            FROM supplier_invoice_lines
            WHERE supplier_invoice_id IN ({_placeholders(document_ids)})
              AND popdv_field IS NOT NULL
            ORDER BY supplier_invoice_id, sort_order
            """,
            list(document_ids),
        ).fetchall()
        return parse_records(PurchaseLineRecord, rows, "purchase line")

    def _list_documents(
        self,
        table: str,
        tenant_id: str,
        start_date: date,
        end_date: date,
        statuses: Sequence[str],
        legal_entity_id: str | None,
    ) -> list[DocumentRecord]:
        if not statuses:
            return []
        conn = self._db.get_connection()
        query = f"""
            SELECT id, status, vat_date, legal_entity_id FROM {table}
            WHERE tenant_id = ?
              AND status IN ({_placeholders(statuses)})
              AND vat_date >= ? AND vat_date <= ?
        """
        params: list[str] = [tenant_id, *statuses]
        params += [start_date.isoformat(), end_date.isoformat()]
        if legal_entity_id is not None:
            query += " AND legal_entity_id = ?"
            params.append(legal_entity_id)
        query += " ORDER BY vat_date, id"
        rows = conn.execute(query, params).fetchall()
        return parse_records(DocumentRecord, rows, table)


class SQLiteReverseChargeEntryRepository(ReverseChargeEntryRepository):
    """SQLite implementation of ReverseChargeEntryRepository."""

    def __init__(self, database: SQLiteDatabase) -> None:
        self._db = database

    def add_many(self, entries: Sequence[ReverseChargeLedgerEntry]) -> None:
        if not entries:
            return
        conn = self._db.get_connection()
        # Commits on success, rolls the whole batch back on any failure.
        with conn:
            conn.executemany(
                """
                INSERT INTO reverse_charge_entries (
                    id, tenant_id, supplier_invoice_id, supplier_invoice_line_id,
                    input_popdv_field, output_popdv_field, base_amount, vat_amount,
                    vat_date, created_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        str(entry.id),
                        entry.tenant_id,
                        entry.source_document_id,
                        entry.source_line_id,
                        entry.input_field_code,
                        entry.output_field_code,
                        str(entry.base_amount),
                        str(entry.vat_amount),
                        entry.vat_date.isoformat(),
                        entry.created_at.isoformat(),
                    )
                    for entry in entries
                ],
            )

    def get(self, entry_id: UUID) -> ReverseChargeLedgerEntry | None:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM reverse_charge_entries WHERE id = ?", (str(entry_id),)
        ).fetchone()
        if row is None:
            return None
        return self._row_to_entry(row)

    def list_by_document(
        self, source_document_id: str
    ) -> Iterable[ReverseChargeLedgerEntry]:
        conn = self._db.get_connection()
        rows = conn.execute(
            """
            SELECT * FROM reverse_charge_entries
            WHERE supplier_invoice_id = ?
            ORDER BY created_at, supplier_invoice_line_id
            """,
            (source_document_id,),
        ).fetchall()
        return [self._row_to_entry(row) for row in rows]

    def list_by_period(
        self, tenant_id: str, start_date: date, end_date: date
    ) -> Iterable[ReverseChargeLedgerEntry]:
        conn = self._db.get_connection()
        rows = conn.execute(
            """
            SELECT * FROM reverse_charge_entries
            WHERE tenant_id = ? AND vat_date >= ? AND vat_date <= ?
            ORDER BY vat_date, supplier_invoice_id, supplier_invoice_line_id
            """,
            (tenant_id, start_date.isoformat(), end_date.isoformat()),
        ).fetchall()
        return [self._row_to_entry(row) for row in rows]

    def _row_to_entry(self, row: sqlite3.Row) -> ReverseChargeLedgerEntry:
        return ReverseChargeLedgerEntry(
            id=UUID(row["id"]),
            tenant_id=row["tenant_id"],
            source_document_id=row["supplier_invoice_id"],
            source_line_id=row["supplier_invoice_line_id"],
            input_field_code=row["input_popdv_field"],
            output_field_code=row["output_popdv_field"],
            base_amount=Decimal(row["base_amount"]),
            vat_amount=Decimal(row["vat_amount"]),
            vat_date=date.fromisoformat(row["vat_date"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )
