from vat_declaration.domain.aggregation import AggregatedLine
from vat_declaration.domain.declaration import (
    Declaration,
    DeclarationHeader,
    SectionTotals,
)
from vat_declaration.domain.periods import TaxPeriod
from vat_declaration.domain.tax_lines import RawTaxLine
from vat_declaration.domain.value_objects import Direction

__all__ = [
    "AggregatedLine",
    "Declaration",
    "DeclarationHeader",
    "Direction",
    "RawTaxLine",
    "SectionTotals",
    "TaxPeriod",
]

__version__ = "0.1.0"
