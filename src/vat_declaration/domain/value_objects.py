from decimal import Decimal
from enum import Enum

ZERO = Decimal("0")

STANDARD_RATE = Decimal("20")
REDUCED_RATE = Decimal("10")
ZERO_RATE = Decimal("0")


class Direction(str, Enum):
    OUTPUT = "output"
    INPUT = "input"


class SalesDocumentStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    POSTED = "posted"
    CANCELLED = "cancelled"


class PurchaseDocumentStatus(str, Enum):
    DRAFT = "draft"
    RECEIVED = "received"
    APPROVED = "approved"
    PAID = "paid"
    POSTED = "posted"
    REJECTED = "rejected"


class CreditNoteStatus(str, Enum):
    DRAFT = "draft"
    APPROVED = "approved"
    SENT = "sent"
    POSTED = "posted"
    CANCELLED = "cancelled"


# Document states whose lines count towards a period's declaration.
DECLARABLE_SALES_STATUSES: tuple[SalesDocumentStatus, ...] = (
    SalesDocumentStatus.SENT,
    SalesDocumentStatus.PAID,
    SalesDocumentStatus.POSTED,
)
DECLARABLE_PURCHASE_STATUSES: tuple[PurchaseDocumentStatus, ...] = (
    PurchaseDocumentStatus.APPROVED,
    PurchaseDocumentStatus.PAID,
    PurchaseDocumentStatus.POSTED,
)
DECLARABLE_CREDIT_NOTE_STATUSES: tuple[CreditNoteStatus, ...] = (
    CreditNoteStatus.POSTED,
    CreditNoteStatus.SENT,
    CreditNoteStatus.APPROVED,
)

# Supplier document states that trigger reverse-charge ledger entries.
REVERSE_CHARGE_TRIGGER_STATUSES: tuple[PurchaseDocumentStatus, ...] = (
    PurchaseDocumentStatus.APPROVED,
    PurchaseDocumentStatus.RECEIVED,
)


def to_decimal(value: Decimal | int | float | str | None) -> Decimal:
    """Coerce a record-store amount to Decimal; None reads as zero."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


__all__ = [
    "CreditNoteStatus",
    "DECLARABLE_CREDIT_NOTE_STATUSES",
    "DECLARABLE_PURCHASE_STATUSES",
    "DECLARABLE_SALES_STATUSES",
    "Direction",
    "PurchaseDocumentStatus",
    "REDUCED_RATE",
    "REVERSE_CHARGE_TRIGGER_STATUSES",
    "STANDARD_RATE",
    "SalesDocumentStatus",
    "ZERO",
    "ZERO_RATE",
    "to_decimal",
]
