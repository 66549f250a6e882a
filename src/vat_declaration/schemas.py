"""Pydantic v2 schemas for records delivered by the record store.

Records are validated here, at the ingestion boundary, and converted to
RawTaxLine before they reach the aggregation functions.
"""

from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from vat_declaration.domain.tax_lines import RawTaxLine, normalize_credit_note
from vat_declaration.domain.value_objects import STANDARD_RATE, to_decimal
from vat_declaration.exceptions import MalformedRecordError

RecordT = TypeVar("RecordT", bound=BaseModel)


class DocumentRecord(BaseModel):
    """Header of a sales or purchase document selected for a period."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(..., min_length=1)
    status: str
    vat_date: date
    legal_entity_id: str | None = None


class SalesLineRecord(BaseModel):
    """Line of a posted sales invoice."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    source_id: str = Field(..., min_length=1)
    line_id: str | None = None
    field_code: str | None = None
    rate: Decimal | None = None
    base: Decimal | None = None
    tax: Decimal | None = None
    gross: Decimal | None = None
    non_deductible: Decimal | None = None

    def to_raw_line(self) -> RawTaxLine:
        return RawTaxLine(
            source_id=self.source_id,
            field_code=self.field_code or None,
            rate=to_decimal(self.rate),
            base=to_decimal(self.base),
            tax=to_decimal(self.tax),
            gross=self.gross,
            non_deductible=to_decimal(self.non_deductible),
        )


class PurchaseLineRecord(SalesLineRecord):
    """Line of an approved supplier invoice."""

    fee: Decimal | None = None

    def to_raw_line(self) -> RawTaxLine:
        return RawTaxLine(
            source_id=self.source_id,
            field_code=self.field_code or None,
            rate=to_decimal(self.rate),
            base=to_decimal(self.base),
            tax=to_decimal(self.tax),
            gross=self.gross,
            non_deductible=to_decimal(self.non_deductible),
            fee=to_decimal(self.fee),
        )


class CreditNoteRecord(BaseModel):
    """Approved credit note; carries document totals only."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    source_id: str = Field(..., min_length=1)
    issued_at: date | None = None
    subtotal: Decimal | None = None
    tax_amount: Decimal | None = None
    total: Decimal | None = None

    def to_raw_line(self, default_rate: Decimal = STANDARD_RATE) -> RawTaxLine:
        return normalize_credit_note(
            self.source_id,
            self.subtotal,
            self.tax_amount,
            self.total,
            default_rate=default_rate,
        )


def parse_records(
    model: type[RecordT], rows: Iterable[Mapping[str, Any] | Any], kind: str
) -> list[RecordT]:
    """Validate raw record-store rows, failing on the first malformed one.

    Rows may be dicts or anything dict() accepts (e.g. sqlite3.Row).
    """
    records: list[RecordT] = []
    for row in rows:
        data = dict(row)
        try:
            records.append(model.model_validate(data))
        except PydanticValidationError as exc:
            source_id = data.get("source_id") or data.get("id")
            raise MalformedRecordError(
                kind, str(source_id) if source_id else None, str(exc)
            ) from exc
    return records
