from collections.abc import Iterator
from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from vat_declaration.config import Environment, Settings
from vat_declaration.domain.periods import TaxPeriod
from vat_declaration.domain.tax_lines import RawTaxLine
from vat_declaration.repositories.sqlite import (
    SQLiteDatabase,
    SQLiteReverseChargeEntryRepository,
    SQLiteTaxLineSource,
)

TENANT_ID = "tenant-1"


def raw_line(
    field_code: str | None,
    base: str,
    tax: str,
    rate: str = "20",
    *,
    source_id: str = "doc-1",
    gross: str | None = None,
    non_deductible: str = "0",
    fee: str = "0",
) -> RawTaxLine:
    return RawTaxLine(
        source_id=source_id,
        field_code=field_code,
        rate=Decimal(rate),
        base=Decimal(base),
        tax=Decimal(tax),
        gross=Decimal(gross) if gross is not None else None,
        non_deductible=Decimal(non_deductible),
        fee=Decimal(fee),
    )


def insert_sales_invoice(
    db: SQLiteDatabase,
    lines: list[tuple[str | None, str, str, str]],
    *,
    status: str = "posted",
    vat_date: date = date(2026, 1, 15),
    tenant_id: str = TENANT_ID,
    legal_entity_id: str | None = None,
    invoice_id: str | None = None,
) -> str:
    """Insert a sales invoice; lines are (field_code, base, tax, rate)."""
    invoice_id = invoice_id or str(uuid4())
    conn = db.get_connection()
    conn.execute(
        "INSERT INTO invoices (id, tenant_id, legal_entity_id, status, vat_date) "
        "VALUES (?, ?, ?, ?, ?)",
        (invoice_id, tenant_id, legal_entity_id, status, vat_date.isoformat()),
    )
    for order, (field_code, base, tax, rate) in enumerate(lines):
        conn.execute(
            "INSERT INTO invoice_lines (id, invoice_id, line_total, tax_amount, "
            "tax_rate_value, popdv_field, sort_order) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (str(uuid4()), invoice_id, base, tax, rate, field_code, order),
        )
    conn.commit()
    return invoice_id


def insert_supplier_invoice(
    db: SQLiteDatabase,
    lines: list[tuple[str | None, str, str, str]],
    *,
    status: str = "approved",
    vat_date: date = date(2026, 1, 15),
    tenant_id: str = TENANT_ID,
    legal_entity_id: str | None = None,
    invoice_id: str | None = None,
) -> str:
    """Insert a supplier invoice; lines are (field_code, base, tax, rate)."""
    invoice_id = invoice_id or str(uuid4())
    conn = db.get_connection()
    conn.execute(
        "INSERT INTO supplier_invoices (id, tenant_id, legal_entity_id, status, "
        "vat_date) VALUES (?, ?, ?, ?, ?)",
        (invoice_id, tenant_id, legal_entity_id, status, vat_date.isoformat()),
    )
    for order, (field_code, base, tax, rate) in enumerate(lines):
        conn.execute(
            "INSERT INTO supplier_invoice_lines (id, supplier_invoice_id, "
            "line_total, tax_amount, tax_rate_value, popdv_field, sort_order) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (str(uuid4()), invoice_id, base, tax, rate, field_code, order),
        )
    conn.commit()
    return invoice_id


def insert_credit_note(
    db: SQLiteDatabase,
    subtotal: str,
    tax_amount: str,
    total: str,
    *,
    status: str = "approved",
    issued_at: date = date(2026, 1, 20),
    tenant_id: str = TENANT_ID,
    legal_entity_id: str | None = None,
) -> str:
    note_id = str(uuid4())
    conn = db.get_connection()
    conn.execute(
        "INSERT INTO credit_notes (id, tenant_id, legal_entity_id, status, "
        "issued_at, subtotal, tax_amount, amount) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
        (
            note_id,
            tenant_id,
            legal_entity_id,
            status,
            issued_at.isoformat(),
            subtotal,
            tax_amount,
            total,
        ),
    )
    conn.commit()
    return note_id


@pytest.fixture
def db() -> Iterator[SQLiteDatabase]:
    """Create an in-memory SQLite database for testing."""
    database = SQLiteDatabase(":memory:")
    database.initialize()
    yield database
    database.close()


@pytest.fixture
def source(db: SQLiteDatabase) -> SQLiteTaxLineSource:
    return SQLiteTaxLineSource(db)


@pytest.fixture
def entry_repo(db: SQLiteDatabase) -> SQLiteReverseChargeEntryRepository:
    return SQLiteReverseChargeEntryRepository(db)


@pytest.fixture
def settings() -> Settings:
    return Settings(environment=Environment.TESTING)


@pytest.fixture
def january() -> TaxPeriod:
    return TaxPeriod.monthly(2026, 1)
