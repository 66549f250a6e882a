from vat_declaration.domain.aggregation import AggregatedLine
from vat_declaration.domain.declaration import (
    DECLARATION_FIELD_ORDER,
    Declaration,
    DeclarationHeader,
    SectionTotals,
)
from vat_declaration.domain.periods import TaxPeriod
from vat_declaration.domain.reverse_charge import (
    REVERSE_CHARGE_MAP,
    ReverseChargeLedgerEntry,
    is_reverse_charge_field,
    map_to_output_field,
)
from vat_declaration.domain.tax_lines import (
    RawTaxLine,
    effective_rate,
    field_code_for_rate,
    normalize_credit_note,
)
from vat_declaration.domain.value_objects import (
    CreditNoteStatus,
    Direction,
    PurchaseDocumentStatus,
    SalesDocumentStatus,
)

__all__ = [
    "AggregatedLine",
    "CreditNoteStatus",
    "DECLARATION_FIELD_ORDER",
    "Declaration",
    "DeclarationHeader",
    "Direction",
    "PurchaseDocumentStatus",
    "REVERSE_CHARGE_MAP",
    "RawTaxLine",
    "ReverseChargeLedgerEntry",
    "SalesDocumentStatus",
    "SectionTotals",
    "TaxPeriod",
    "effective_rate",
    "field_code_for_rate",
    "is_reverse_charge_field",
    "map_to_output_field",
    "normalize_credit_note",
]
