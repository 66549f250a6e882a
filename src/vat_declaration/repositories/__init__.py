from vat_declaration.repositories.interfaces import (
    ReverseChargeEntryRepository,
    TaxLineSource,
)
from vat_declaration.repositories.sqlite import (
    SQLiteDatabase,
    SQLiteReverseChargeEntryRepository,
    SQLiteTaxLineSource,
)

__all__ = [
    "ReverseChargeEntryRepository",
    "TaxLineSource",
    "SQLiteDatabase",
    "SQLiteReverseChargeEntryRepository",
    "SQLiteTaxLineSource",
]
