from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from datetime import date
from uuid import UUID

from vat_declaration.domain.reverse_charge import ReverseChargeLedgerEntry
from vat_declaration.schemas import (
    CreditNoteRecord,
    DocumentRecord,
    PurchaseLineRecord,
    SalesLineRecord,
)


class TaxLineSource(ABC):
    """Read access to the documents and lines that feed a declaration."""

    @abstractmethod
    def list_sales_documents(
        self,
        tenant_id: str,
        start_date: date,
        end_date: date,
        statuses: Sequence[str],
        legal_entity_id: str | None = None,
    ) -> Iterable[DocumentRecord]:
        pass

    @abstractmethod
    def list_sales_lines(self, document_ids: Sequence[str]) -> Iterable[SalesLineRecord]:
        pass

    @abstractmethod
    def list_credit_notes(
        self,
        tenant_id: str,
        start_date: date,
        end_date: date,
        statuses: Sequence[str],
        legal_entity_id: str | None = None,
    ) -> Iterable[CreditNoteRecord]:
        pass

    @abstractmethod
    def list_purchase_documents(
        self,
        tenant_id: str,
        start_date: date,
        end_date: date,
        statuses: Sequence[str],
        legal_entity_id: str | None = None,
    ) -> Iterable[DocumentRecord]:
        pass

    @abstractmethod
    def list_purchase_lines(
        self, document_ids: Sequence[str]
    ) -> Iterable[PurchaseLineRecord]:
        pass


class ReverseChargeEntryRepository(ABC):
    @abstractmethod
    def add_many(self, entries: Sequence[ReverseChargeLedgerEntry]) -> None:
        """Persist all entries or none of them."""

    @abstractmethod
    def get(self, entry_id: UUID) -> ReverseChargeLedgerEntry | None:
        pass

    @abstractmethod
    def list_by_document(
        self, source_document_id: str
    ) -> Iterable[ReverseChargeLedgerEntry]:
        pass

    @abstractmethod
    def list_by_period(
        self, tenant_id: str, start_date: date, end_date: date
    ) -> Iterable[ReverseChargeLedgerEntry]:
        pass
