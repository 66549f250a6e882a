from vat_declaration.services.aggregation import (
    DeclarationService,
    PeriodResult,
    aggregate_lines,
    chunked,
)
from vat_declaration.services.declaration import build_declaration
from vat_declaration.services.grouping import group_lines
from vat_declaration.services.reverse_charge import (
    ReverseChargeLedgerWriter,
    generate_reverse_charge_lines,
    should_write_for_status,
)
from vat_declaration.services.sections import (
    compute_section_totals,
    get_field,
    sum_field,
)
from vat_declaration.services.serializer import (
    declaration_filename,
    declaration_summary,
    format_amount,
    render_declaration_xml,
)

__all__ = [
    "DeclarationService",
    "PeriodResult",
    "ReverseChargeLedgerWriter",
    "aggregate_lines",
    "build_declaration",
    "chunked",
    "compute_section_totals",
    "declaration_filename",
    "declaration_summary",
    "format_amount",
    "generate_reverse_charge_lines",
    "get_field",
    "group_lines",
    "render_declaration_xml",
    "should_write_for_status",
    "sum_field",
]
