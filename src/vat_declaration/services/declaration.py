"""Declaration field mapper: section totals and POPDV lines to PP-PDV fields."""

from __future__ import annotations

from collections.abc import Sequence

from vat_declaration.domain import field_codes as fc
from vat_declaration.domain.aggregation import AggregatedLine
from vat_declaration.domain.declaration import Declaration, SectionTotals
from vat_declaration.domain.value_objects import ZERO
from vat_declaration.services.sections import get_field, sum_field


def build_declaration(
    totals: SectionTotals,
    output_lines: Sequence[AggregatedLine],
    input_lines: Sequence[AggregatedLine],
) -> Declaration:
    """Map one period's totals onto the PP-PDV form.

    Each field has its own formula; fields only share the section totals.
    Fields 001 and 002 prefer the POPDV total line (1.5 / 2.5) and fall
    back to the section sum when that line is zero or missing.
    """
    field_001 = get_field(
        output_lines, fc.EXEMPT_WITH_DEDUCTION_TOTAL, "total_base"
    ) or sum_field(output_lines, fc.EXEMPT_WITH_DEDUCTION_PREFIX, "total_base")
    field_002 = get_field(
        output_lines, fc.EXEMPT_WITHOUT_DEDUCTION_TOTAL, "total_base"
    ) or sum_field(output_lines, fc.EXEMPT_WITHOUT_DEDUCTION_PREFIX, "total_base")

    field_004 = sum(
        (get_field(output_lines, code, "total_base") for code in fc.BASE_ADJUSTMENTS),
        ZERO,
    )
    field_006 = sum(
        (
            get_field(input_lines, code, "total_base")
            for code in fc.IMPORT_BASE_ADDITIONS
        ),
        ZERO,
    ) - get_field(input_lines, fc.IMPORT_BASE_REDUCTION, "total_base")

    net = totals.s10

    return Declaration(
        field_001=field_001,
        field_002=field_002,
        field_003=totals.s5_1,
        field_103=totals.s5_2 + totals.s5_3,
        field_004=field_004,
        field_005=totals.s5_1,
        field_105=totals.s5_7,
        field_006=field_006,
        field_106=totals.s6_4,
        field_007=get_field(input_lines, fc.FARMER_BASE, "total_base"),
        field_107=totals.s7_3,
        field_008=totals.s8dj,
        field_108=totals.s9a_1,
        field_009=totals.s8e_3 - totals.s8e_4,
        field_109=totals.s8e_5,
        field_110=net,
        field_111=net if net > ZERO else ZERO,
        field_112=-net if net < ZERO else ZERO,
    )
