"""Raw ledger-level tax lines and credit-note normalization."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from vat_declaration.domain import field_codes
from vat_declaration.domain.value_objects import (
    REDUCED_RATE,
    STANDARD_RATE,
    ZERO,
    ZERO_RATE,
    to_decimal,
)


@dataclass(frozen=True, slots=True)
class RawTaxLine:
    """One monetary line item tied to a POPDV field code.

    `gross` is optional; when absent (or zero) the line's gross is base + tax.
    """

    source_id: str
    field_code: str | None
    rate: Decimal
    base: Decimal
    tax: Decimal
    gross: Decimal | None = None
    non_deductible: Decimal = ZERO
    fee: Decimal = ZERO

    def __post_init__(self) -> None:
        for name in ("rate", "base", "tax", "non_deductible", "fee"):
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                object.__setattr__(self, name, to_decimal(value))
        if self.gross is not None and not isinstance(self.gross, Decimal):
            object.__setattr__(self, "gross", to_decimal(self.gross))

    @property
    def effective_gross(self) -> Decimal:
        if self.gross:
            return self.gross
        return self.base + self.tax


def field_code_for_rate(rate: Decimal) -> str:
    """Pick the domestic sales field code for a credit note's effective rate."""
    if rate == REDUCED_RATE:
        return field_codes.SALES_REDUCED_RATE
    if rate == ZERO_RATE:
        return field_codes.SALES_ZERO_RATE
    return field_codes.SALES_STANDARD_RATE


def effective_rate(
    subtotal: Decimal, tax_amount: Decimal, default_rate: Decimal = STANDARD_RATE
) -> Decimal:
    """Whole-percent rate implied by a document's totals.

    Falls back to `default_rate` when the subtotal is not positive.
    """
    if subtotal > ZERO:
        return (tax_amount / subtotal * 100).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP
        )
    return default_rate


def normalize_credit_note(
    source_id: str,
    subtotal: Decimal | int | float | str | None,
    tax_amount: Decimal | int | float | str | None,
    total: Decimal | int | float | str | None,
    default_rate: Decimal = STANDARD_RATE,
) -> RawTaxLine:
    """Turn an approved credit note into one negative synthetic sales line."""
    subtotal_amount = to_decimal(subtotal)
    tax = to_decimal(tax_amount)
    rate = effective_rate(subtotal_amount, tax, default_rate)
    return RawTaxLine(
        source_id=source_id,
        field_code=field_code_for_rate(rate),
        rate=rate,
        base=-subtotal_amount,
        tax=-tax,
        gross=-to_decimal(total),
    )
