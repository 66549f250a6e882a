"""PP-PDV declaration value objects."""

from collections.abc import Iterator
from dataclasses import dataclass, fields
from datetime import date
from decimal import Decimal

from vat_declaration.domain.periods import TaxPeriod
from vat_declaration.domain.value_objects import ZERO


@dataclass(frozen=True, slots=True)
class SectionTotals:
    """POPDV summary sections 5, 8e and 10 for one period."""

    # Section 5 - output VAT
    s5_1: Decimal = ZERO  # Total taxable base (sections 3 + 3a)
    s5_2: Decimal = ZERO  # Special procedures base
    s5_3: Decimal = ZERO  # Special procedures VAT
    s5_7: Decimal = ZERO  # Total output VAT

    # Section 8e - input VAT
    s8a_8: Decimal = ZERO  # VAT from 8a
    s8b_6: Decimal = ZERO  # VAT from 8b
    s8g_5: Decimal = ZERO  # VAT from 8g
    s6_4: Decimal = ZERO  # Import VAT
    s7_3: Decimal = ZERO  # Farmer compensation
    s8dj: Decimal = ZERO  # Input VAT before deductions (8đ)
    s9a_1: Decimal = ZERO  # Non-deductible total
    s8e_1: Decimal = ZERO  # 8đ - 9a.1
    s8e_3: Decimal = ZERO  # Correction increase
    s8e_4: Decimal = ZERO  # Correction decrease
    s8e_5: Decimal = ZERO  # Total deductible input VAT

    # Section 10 - positive is payable, negative is refundable
    s10: Decimal = ZERO


@dataclass(frozen=True, slots=True)
class Declaration:
    """The eighteen numeric fields of the PP-PDV return.

    Field declaration order is the form's canonical order and is the order
    used when the declaration is serialized.
    """

    field_001: Decimal = ZERO  # Exempt supplies with deduction right
    field_002: Decimal = ZERO  # Exempt supplies without deduction right
    field_003: Decimal = ZERO  # Taxable base, regular rates
    field_103: Decimal = ZERO  # Special procedures base + VAT
    field_004: Decimal = ZERO  # Base increases/decreases
    field_005: Decimal = ZERO  # Total taxable base
    field_105: Decimal = ZERO  # Total output VAT
    field_006: Decimal = ZERO  # Import base
    field_106: Decimal = ZERO  # Import VAT
    field_007: Decimal = ZERO  # Farmer purchases base
    field_107: Decimal = ZERO  # Farmer compensation
    field_008: Decimal = ZERO  # Input VAT before deductions
    field_108: Decimal = ZERO  # Non-deductible input VAT
    field_009: Decimal = ZERO  # Net correction
    field_109: Decimal = ZERO  # Deductible input VAT
    field_110: Decimal = ZERO  # Net position
    field_111: Decimal = ZERO  # Payable
    field_112: Decimal = ZERO  # Refundable

    def items(self) -> Iterator[tuple[str, Decimal]]:
        """Yield (field number, amount) pairs in canonical form order."""
        for f in fields(self):
            yield f.name.removeprefix("field_"), getattr(self, f.name)

    @property
    def net_position(self) -> Decimal:
        return self.field_110

    @property
    def is_payable(self) -> bool:
        return self.field_111 > ZERO

    @property
    def is_refundable(self) -> bool:
        return self.field_112 > ZERO


DECLARATION_FIELD_ORDER: tuple[str, ...] = tuple(
    f.name.removeprefix("field_") for f in fields(Declaration)
)


@dataclass(frozen=True, slots=True)
class DeclarationHeader:
    """Taxpayer and period metadata printed on the filed document."""

    taxpayer_id: str
    entity_name: str
    period_start: date
    period_end: date
    period_year: int
    period_month: int

    @classmethod
    def for_period(
        cls, taxpayer_id: str, entity_name: str, period: TaxPeriod
    ) -> "DeclarationHeader":
        return cls(
            taxpayer_id=taxpayer_id,
            entity_name=entity_name,
            period_start=period.start,
            period_end=period.end,
            period_year=period.year,
            period_month=period.month,
        )
