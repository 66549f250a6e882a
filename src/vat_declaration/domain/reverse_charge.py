"""Reverse-charge mapping and ledger entries.

Purchases from foreign suppliers (8g) and domestic purchases where the buyer
is the tax debtor (8b) are also declared as output VAT in section 3a.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from decimal import Decimal
from types import MappingProxyType
from uuid import UUID, uuid4

REVERSE_CHARGE_MAP: Mapping[str, str] = MappingProxyType(
    {
        "8g.1": "3a.2",
        "8g.2": "3a.4",
        "8g.3": "3a.5",
        "8g.4": "3a.6",
        "8b.1": "3a.1",
        "8b.2": "3a.2",
        "8b.3": "3a.4",
        "8b.4": "3a.5",
        "8b.5": "3a.6",
    }
)


def is_reverse_charge_field(
    field_code: str | None, mapping: Mapping[str, str] = REVERSE_CHARGE_MAP
) -> bool:
    return field_code is not None and field_code in mapping


def map_to_output_field(
    field_code: str, mapping: Mapping[str, str] = REVERSE_CHARGE_MAP
) -> str | None:
    return mapping.get(field_code)


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class ReverseChargeLedgerEntry:
    """Audit record linking one purchase line to its derived output field.

    Written once when the purchase document is approved; never updated.
    """

    tenant_id: str
    source_document_id: str
    source_line_id: str
    input_field_code: str
    output_field_code: str
    base_amount: Decimal
    vat_amount: Decimal
    vat_date: date
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=_utc_now)
