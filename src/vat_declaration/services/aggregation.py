"""Period aggregation: from record-store documents to a PP-PDV declaration.

Fetching is the only I/O. Once all lines of a period are materialized the
rest of the pipeline is pure, so runs for different tenants or periods can
execute in parallel without coordination.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal

from vat_declaration.config import Settings, get_settings
from vat_declaration.domain.aggregation import AggregatedLine
from vat_declaration.domain.declaration import (
    Declaration,
    DeclarationHeader,
    SectionTotals,
)
from vat_declaration.domain.periods import TaxPeriod
from vat_declaration.domain.reverse_charge import REVERSE_CHARGE_MAP
from vat_declaration.domain.tax_lines import RawTaxLine
from vat_declaration.domain.value_objects import (
    DECLARABLE_CREDIT_NOTE_STATUSES,
    DECLARABLE_PURCHASE_STATUSES,
    DECLARABLE_SALES_STATUSES,
    Direction,
)
from vat_declaration.exceptions import RecordSourceError, VatDeclarationError
from vat_declaration.logging_config import get_logger, log_context
from vat_declaration.repositories.interfaces import TaxLineSource
from vat_declaration.services.declaration import build_declaration
from vat_declaration.services.grouping import group_lines
from vat_declaration.services.reverse_charge import generate_reverse_charge_lines
from vat_declaration.services.sections import compute_section_totals
from vat_declaration.services.serializer import render_declaration_xml

logger = get_logger(__name__)


@dataclass(frozen=True)
class PeriodResult:
    """Everything computed for one (tenant, period, legal entity) run."""

    output_lines: list[AggregatedLine]
    input_lines: list[AggregatedLine]
    reverse_charge_lines: list[AggregatedLine]
    section_totals: SectionTotals
    declaration: Declaration

    @property
    def all_output_lines(self) -> list[AggregatedLine]:
        return [*self.output_lines, *self.reverse_charge_lines]

    @property
    def net_position(self) -> Decimal:
        return self.section_totals.s10


def chunked(ids: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    """Yield successive batches of at most `size` ids."""
    if size < 1:
        raise ValueError(f"Chunk size must be positive: {size}")
    for i in range(0, len(ids), size):
        yield ids[i : i + size]


def aggregate_lines(
    sales_lines: Sequence[RawTaxLine],
    purchase_lines: Sequence[RawTaxLine],
    mapping: Mapping[str, str] = REVERSE_CHARGE_MAP,
) -> PeriodResult:
    """Run the pure pipeline over already-materialized lines.

    Order of the input collections does not affect the result.
    """
    output_lines = group_lines(sales_lines, Direction.OUTPUT)
    input_lines = group_lines(purchase_lines, Direction.INPUT)
    reverse_charge_lines = generate_reverse_charge_lines(input_lines, mapping)

    all_output = [*output_lines, *reverse_charge_lines]
    totals = compute_section_totals(all_output, input_lines)
    declaration = build_declaration(totals, all_output, input_lines)

    return PeriodResult(
        output_lines=output_lines,
        input_lines=input_lines,
        reverse_charge_lines=reverse_charge_lines,
        section_totals=totals,
        declaration=declaration,
    )


class DeclarationService:
    """Builds PP-PDV declarations from a TaxLineSource."""

    def __init__(
        self,
        source: TaxLineSource,
        settings: Settings | None = None,
        mapping: Mapping[str, str] = REVERSE_CHARGE_MAP,
    ) -> None:
        self._source = source
        self._settings = settings or get_settings()
        self._mapping = mapping

    def aggregate_period(
        self,
        tenant_id: str,
        period: TaxPeriod,
        legal_entity_id: str | None = None,
    ) -> PeriodResult:
        """Aggregate every declarable line of a period.

        Raises:
            RecordSourceError: If the record store fails or returns malformed
                records. No partial result is produced.
        """
        with log_context(
            tenant_id=tenant_id,
            period_start=period.start.isoformat(),
            period_end=period.end.isoformat(),
            legal_entity_id=legal_entity_id,
        ):
            try:
                sales_lines = self.collect_sales_lines(tenant_id, period, legal_entity_id)
                purchase_lines = self.collect_purchase_lines(
                    tenant_id, period, legal_entity_id
                )
            except VatDeclarationError as exc:
                logger.error("record_source_failed", error=exc.message)
                raise
            except Exception as exc:
                logger.error("record_source_failed", error=str(exc))
                raise RecordSourceError(
                    f"Record store failed for tenant {tenant_id}: {exc}",
                    context={
                        "tenant_id": tenant_id,
                        "period_start": period.start.isoformat(),
                        "period_end": period.end.isoformat(),
                    },
                ) from exc

            result = aggregate_lines(sales_lines, purchase_lines, self._mapping)

            logger.info(
                "period_aggregated",
                sales_lines=len(sales_lines),
                purchase_lines=len(purchase_lines),
                output_fields=len(result.output_lines),
                input_fields=len(result.input_lines),
                reverse_charge_fields=len(result.reverse_charge_lines),
                net_position=str(result.net_position),
            )
            return result

    def collect_sales_lines(
        self,
        tenant_id: str,
        period: TaxPeriod,
        legal_entity_id: str | None = None,
    ) -> list[RawTaxLine]:
        """Sales lines plus one synthetic negative line per credit note."""
        documents = self._source.list_sales_documents(
            tenant_id,
            period.start,
            period.end,
            [s.value for s in DECLARABLE_SALES_STATUSES],
            legal_entity_id,
        )
        document_ids = [doc.id for doc in documents]

        lines: list[RawTaxLine] = []
        for chunk in chunked(document_ids, self._settings.fetch_chunk_size):
            lines.extend(
                record.to_raw_line() for record in self._source.list_sales_lines(chunk)
            )

        credit_notes = self._source.list_credit_notes(
            tenant_id,
            period.start,
            period.end,
            [s.value for s in DECLARABLE_CREDIT_NOTE_STATUSES],
            legal_entity_id,
        )
        default_rate = self._settings.default_adjustment_rate
        lines.extend(note.to_raw_line(default_rate) for note in credit_notes)

        logger.debug(
            "sales_lines_collected",
            documents=len(document_ids),
            lines=len(lines),
        )
        return lines

    def collect_purchase_lines(
        self,
        tenant_id: str,
        period: TaxPeriod,
        legal_entity_id: str | None = None,
    ) -> list[RawTaxLine]:
        documents = self._source.list_purchase_documents(
            tenant_id,
            period.start,
            period.end,
            [s.value for s in DECLARABLE_PURCHASE_STATUSES],
            legal_entity_id,
        )
        document_ids = [doc.id for doc in documents]

        lines: list[RawTaxLine] = []
        for chunk in chunked(document_ids, self._settings.fetch_chunk_size):
            lines.extend(
                record.to_raw_line()
                for record in self._source.list_purchase_lines(chunk)
            )

        logger.debug(
            "purchase_lines_collected",
            documents=len(document_ids),
            lines=len(lines),
        )
        return lines

    def render(self, result: PeriodResult, header: DeclarationHeader) -> str:
        return render_declaration_xml(result.declaration, header)
