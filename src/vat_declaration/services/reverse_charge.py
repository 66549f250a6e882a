"""Reverse-charge transformation and ledger writing."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date

from vat_declaration.domain.aggregation import AggregatedLine
from vat_declaration.domain.reverse_charge import (
    REVERSE_CHARGE_MAP,
    ReverseChargeLedgerEntry,
)
from vat_declaration.domain.value_objects import (
    REVERSE_CHARGE_TRIGGER_STATUSES,
    PurchaseDocumentStatus,
    to_decimal,
)
from vat_declaration.exceptions import LedgerWriteError, VatDeclarationError
from vat_declaration.logging_config import get_logger
from vat_declaration.repositories.interfaces import ReverseChargeEntryRepository
from vat_declaration.schemas import PurchaseLineRecord

logger = get_logger(__name__)


def generate_reverse_charge_lines(
    input_lines: Iterable[AggregatedLine],
    mapping: Mapping[str, str] = REVERSE_CHARGE_MAP,
) -> list[AggregatedLine]:
    """Derive output-side lines from reverse-charge eligible input lines.

    One output line per mapped input line, in input order. Several input
    codes may map to the same output code; those stay separate lines here.
    """
    result: list[AggregatedLine] = []
    for line in input_lines:
        output_field = mapping.get(line.field_code)
        if output_field is None:
            continue
        result.append(line.as_reverse_charge(output_field))
    return result


def should_write_for_status(status: PurchaseDocumentStatus | str) -> bool:
    """Whether a supplier document in this state triggers ledger entries."""
    try:
        return PurchaseDocumentStatus(status) in REVERSE_CHARGE_TRIGGER_STATUSES
    except ValueError:
        return False


class ReverseChargeLedgerWriter:
    """Persists reverse-charge ledger entries when a supplier invoice is approved.

    This is the only effectful step of the engine. The caller (the approval
    workflow) must not invoke it twice for the same document; entries are not
    de-duplicated here.
    """

    def __init__(
        self,
        entry_repo: ReverseChargeEntryRepository,
        mapping: Mapping[str, str] = REVERSE_CHARGE_MAP,
    ) -> None:
        self._entry_repo = entry_repo
        self._mapping = mapping

    def build_entries(
        self,
        tenant_id: str,
        document_id: str,
        vat_date: date,
        lines: Iterable[PurchaseLineRecord],
    ) -> list[ReverseChargeLedgerEntry]:
        entries: list[ReverseChargeLedgerEntry] = []
        for line in lines:
            if not line.field_code:
                continue
            output_field = self._mapping.get(line.field_code)
            if output_field is None:
                continue
            entries.append(
                ReverseChargeLedgerEntry(
                    tenant_id=tenant_id,
                    source_document_id=document_id,
                    source_line_id=line.line_id or line.source_id,
                    input_field_code=line.field_code,
                    output_field_code=output_field,
                    base_amount=to_decimal(line.base),
                    vat_amount=to_decimal(line.tax),
                    vat_date=vat_date,
                )
            )
        return entries

    def write_entries(
        self,
        tenant_id: str,
        document_id: str,
        vat_date: date,
        lines: Iterable[PurchaseLineRecord],
    ) -> list[ReverseChargeLedgerEntry]:
        """Write one entry per qualifying line, atomically.

        Returns the written entries; an empty list when no line qualifies.

        Raises:
            LedgerWriteError: If the batch could not be persisted. Nothing
                from the batch is kept.
        """
        entries = self.build_entries(tenant_id, document_id, vat_date, lines)
        if not entries:
            return []

        try:
            self._entry_repo.add_many(entries)
        except VatDeclarationError:
            raise
        except Exception as exc:
            logger.error(
                "reverse_charge_write_failed",
                tenant_id=tenant_id,
                document_id=document_id,
                entry_count=len(entries),
                error=str(exc),
            )
            raise LedgerWriteError(document_id, len(entries), str(exc)) from exc

        logger.info(
            "reverse_charge_entries_written",
            tenant_id=tenant_id,
            document_id=document_id,
            entry_count=len(entries),
        )
        return entries

    def write_on_approval(
        self,
        tenant_id: str,
        document_id: str,
        status: PurchaseDocumentStatus | str,
        vat_date: date,
        lines: Iterable[PurchaseLineRecord],
    ) -> list[ReverseChargeLedgerEntry]:
        """Write entries only if the document reached a triggering state."""
        if not should_write_for_status(status):
            logger.debug(
                "reverse_charge_skipped",
                document_id=document_id,
                status=str(getattr(status, "value", status)),
            )
            return []
        return self.write_entries(tenant_id, document_id, vat_date, lines)
