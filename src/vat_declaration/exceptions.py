"""Exception hierarchy for the VAT declaration engine.

All engine exceptions inherit from VatDeclarationError, so callers can catch
every engine failure with a single base class while still telling an
upstream fetch failure apart from a failed ledger write.

Missing data (absent field codes, unknown rates, missing gross amounts) is
never an error; it contributes zero to the declaration.
"""

from typing import Any


class VatDeclarationError(Exception):
    """Base exception for all VAT declaration engine errors.

    Includes an error_code and status_code for request-handling collaborators
    and an extra context dict for structured logging.
    """

    error_code: str = "VATD_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        if status_code:
            self.status_code = status_code
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Record Source Errors
# =============================================================================


class RecordSourceError(VatDeclarationError):
    """Raised when the record store cannot deliver the lines for a period.

    Fatal for the aggregation run: no partial declaration is produced.
    """

    error_code = "RECORD_SOURCE_ERROR"
    status_code = 502


class MalformedRecordError(RecordSourceError):
    """Raised when a record returned by the record store fails validation."""

    error_code = "MALFORMED_RECORD"

    def __init__(self, record_kind: str, source_id: str | None, reason: str) -> None:
        super().__init__(
            f"Malformed {record_kind} record {source_id or '<unknown>'}: {reason}",
            context={
                "record_kind": record_kind,
                "source_id": source_id,
                "reason": reason,
            },
        )


# =============================================================================
# Ledger Errors
# =============================================================================


class LedgerWriteError(VatDeclarationError):
    """Raised when reverse-charge ledger entries could not be persisted.

    The write is all-or-nothing; the approval step must be treated as failed
    and may be retried.
    """

    error_code = "LEDGER_WRITE_ERROR"
    status_code = 500

    def __init__(self, document_id: str, entry_count: int, reason: str) -> None:
        super().__init__(
            f"Failed to write {entry_count} reverse-charge entries "
            f"for document {document_id}: {reason}",
            context={
                "document_id": document_id,
                "entry_count": entry_count,
                "reason": reason,
            },
        )


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(VatDeclarationError):
    """Base exception for validation errors."""

    error_code = "VALIDATION_ERROR"
    status_code = 422


class InvalidPeriodError(ValidationError):
    """Raised when tax period bounds are inconsistent."""

    error_code = "INVALID_PERIOD"

    def __init__(self, start: str, end: str, reason: str) -> None:
        super().__init__(
            f"Invalid tax period {start}..{end}: {reason}",
            context={"start": start, "end": end, "reason": reason},
        )
