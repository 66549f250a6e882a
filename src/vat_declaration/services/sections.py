"""Section aggregator: POPDV sections 5, 8e and 10 from grouped lines.

All sums are exact Decimal arithmetic. A field code with no line
contributes zero.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Literal

from vat_declaration.domain import field_codes as fc
from vat_declaration.domain.aggregation import AggregatedLine
from vat_declaration.domain.declaration import SectionTotals
from vat_declaration.domain.value_objects import ZERO

AmountField = Literal["total_base", "total_vat", "vat_non_deductible", "fee_value"]


def sum_field(
    lines: Sequence[AggregatedLine], prefix: str, attr: AmountField
) -> Decimal:
    """Sum `attr` over every line whose field code starts with `prefix`."""
    return sum(
        (getattr(line, attr) for line in lines if line.field_code.startswith(prefix)),
        ZERO,
    )


def get_field(
    lines: Sequence[AggregatedLine], field_code: str, attr: AmountField
) -> Decimal:
    """`attr` of the first line with exactly this field code, else zero."""
    for line in lines:
        if line.field_code == field_code:
            return getattr(line, attr)
    return ZERO


def compute_section_totals(
    output_lines: Sequence[AggregatedLine],
    input_lines: Sequence[AggregatedLine],
) -> SectionTotals:
    """Compute the summary sections for one period.

    Args:
        output_lines: Grouped sales lines merged with reverse-charge lines.
        input_lines: Grouped purchase lines.
    """
    # Section 5: taxable base covers sections 3 and 3a
    s5_1 = sum_field(output_lines, fc.REGULAR_SALES_PREFIX, "total_base")
    s5_2 = sum(
        (get_field(output_lines, code, "total_base") for code in fc.SPECIAL_PROCEDURE_BASE),
        ZERO,
    )
    s5_3 = sum(
        (get_field(output_lines, code, "total_vat") for code in fc.SPECIAL_PROCEDURE_VAT),
        ZERO,
    )
    s5_7 = sum_field(output_lines, fc.REGULAR_SALES_PREFIX, "total_vat") + s5_3

    # Section 8e
    s8a_8 = sum_field(input_lines, fc.DOMESTIC_PURCHASE_PREFIX, "total_vat")
    s8b_6 = sum_field(input_lines, fc.TAX_DEBTOR_PURCHASE_PREFIX, "total_vat")
    s8g_5 = sum_field(input_lines, fc.FOREIGN_SERVICE_PREFIX, "total_vat")
    s6_4 = get_field(input_lines, fc.IMPORT_VAT, "total_vat")
    s7_3 = get_field(input_lines, fc.FARMER_COMPENSATION, "total_vat")
    s8dj = s8a_8 + s8b_6 + s6_4 + s7_3 + s8g_5
    s9a_1 = sum_field(input_lines, fc.NON_DEDUCTIBLE_PREFIX, "vat_non_deductible")
    s8e_1 = s8dj - s9a_1
    # Corrections are booked on the output side
    s8e_3 = get_field(output_lines, fc.CORRECTION_INCREASE, "total_vat")
    s8e_4 = get_field(output_lines, fc.CORRECTION_DECREASE, "total_vat")
    s8e_5 = s8e_1 + s8e_3 - s8e_4

    return SectionTotals(
        s5_1=s5_1,
        s5_2=s5_2,
        s5_3=s5_3,
        s5_7=s5_7,
        s8a_8=s8a_8,
        s8b_6=s8b_6,
        s8g_5=s8g_5,
        s6_4=s6_4,
        s7_3=s7_3,
        s8dj=s8dj,
        s9a_1=s9a_1,
        s8e_1=s8e_1,
        s8e_3=s8e_3,
        s8e_4=s8e_4,
        s8e_5=s8e_5,
        s10=s5_7 - s8e_5,
    )
