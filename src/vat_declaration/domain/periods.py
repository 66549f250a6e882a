from dataclasses import dataclass
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta  # type: ignore[import-untyped]

from vat_declaration.exceptions import InvalidPeriodError


@dataclass(frozen=True, slots=True)
class TaxPeriod:
    """Inclusive date range a declaration covers."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise InvalidPeriodError(
                self.start.isoformat(), self.end.isoformat(), "end precedes start"
            )

    @property
    def year(self) -> int:
        return self.start.year

    @property
    def month(self) -> int:
        return self.start.month

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end

    @classmethod
    def monthly(cls, year: int, month: int) -> "TaxPeriod":
        start = date(year, month, 1)
        return cls(start, start + relativedelta(months=1) - timedelta(days=1))

    @classmethod
    def quarterly(cls, year: int, quarter: int) -> "TaxPeriod":
        if quarter not in (1, 2, 3, 4):
            raise InvalidPeriodError(
                f"{year}-Q{quarter}", f"{year}-Q{quarter}", "quarter must be 1-4"
            )
        start = date(year, 3 * (quarter - 1) + 1, 1)
        return cls(start, start + relativedelta(months=3) - timedelta(days=1))
