from datetime import date

import pytest

from vat_declaration.domain.periods import TaxPeriod
from vat_declaration.exceptions import InvalidPeriodError


class TestTaxPeriod:
    def test_monthly(self):
        period = TaxPeriod.monthly(2026, 2)

        assert period.start == date(2026, 2, 1)
        assert period.end == date(2026, 2, 28)
        assert period.year == 2026
        assert period.month == 2

    def test_monthly_december(self):
        period = TaxPeriod.monthly(2025, 12)

        assert period.end == date(2025, 12, 31)

    def test_monthly_leap_year(self):
        assert TaxPeriod.monthly(2028, 2).end == date(2028, 2, 29)

    @pytest.mark.parametrize(
        ("quarter", "start", "end"),
        [
            (1, date(2026, 1, 1), date(2026, 3, 31)),
            (2, date(2026, 4, 1), date(2026, 6, 30)),
            (3, date(2026, 7, 1), date(2026, 9, 30)),
            (4, date(2026, 10, 1), date(2026, 12, 31)),
        ],
    )
    def test_quarterly(self, quarter: int, start: date, end: date):
        period = TaxPeriod.quarterly(2026, quarter)

        assert (period.start, period.end) == (start, end)

    def test_invalid_quarter_raises(self):
        with pytest.raises(InvalidPeriodError, match="quarter"):
            TaxPeriod.quarterly(2026, 5)

    def test_end_before_start_raises(self):
        with pytest.raises(InvalidPeriodError, match="end precedes start"):
            TaxPeriod(date(2026, 2, 1), date(2026, 1, 31))

    def test_single_day_period(self):
        period = TaxPeriod(date(2026, 1, 1), date(2026, 1, 1))

        assert period.contains(date(2026, 1, 1))

    def test_contains_is_inclusive(self):
        period = TaxPeriod.monthly(2026, 1)

        assert period.contains(date(2026, 1, 1))
        assert period.contains(date(2026, 1, 31))
        assert not period.contains(date(2026, 2, 1))
        assert not period.contains(date(2025, 12, 31))
