"""Per-field-code aggregation of raw tax lines."""

from dataclasses import dataclass, replace
from decimal import Decimal

from vat_declaration.domain.tax_lines import RawTaxLine
from vat_declaration.domain.value_objects import (
    REDUCED_RATE,
    STANDARD_RATE,
    ZERO,
    Direction,
)


@dataclass
class AggregatedLine:
    """Running totals for one POPDV field code in one direction.

    The standard/reduced buckets only see lines taxed at exactly 20 % or 10 %;
    the totals see every contributing line whatever its rate.
    """

    field_code: str
    direction: Direction
    base_standard: Decimal = ZERO
    vat_standard: Decimal = ZERO
    base_reduced: Decimal = ZERO
    vat_reduced: Decimal = ZERO
    total_base: Decimal = ZERO
    total_vat: Decimal = ZERO
    total_gross: Decimal = ZERO
    vat_non_deductible: Decimal = ZERO
    fee_value: Decimal = ZERO
    entry_count: int = 0

    def add(self, line: RawTaxLine) -> None:
        if line.rate == STANDARD_RATE:
            self.base_standard += line.base
            self.vat_standard += line.tax
        elif line.rate == REDUCED_RATE:
            self.base_reduced += line.base
            self.vat_reduced += line.tax

        self.total_base += line.base
        self.total_vat += line.tax
        self.total_gross += line.effective_gross
        self.vat_non_deductible += line.non_deductible
        self.fee_value += line.fee
        self.entry_count += 1

    def as_reverse_charge(self, output_field_code: str) -> "AggregatedLine":
        """Copy this input line onto the output side under another field code.

        Non-deductible VAT and fees have no output-side meaning and are zeroed.
        """
        return replace(
            self,
            field_code=output_field_code,
            direction=Direction.OUTPUT,
            vat_non_deductible=ZERO,
            fee_value=ZERO,
        )
