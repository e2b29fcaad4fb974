from datetime import datetime, timezone

import pytest

from ledger.models.enums import Period
from ledger.services.periods import add_months, month_range, next_occurrence, period_range


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_month_range_wraps_year() -> None:
    assert month_range(2026, 12) == (utc(2026, 12, 1), utc(2027, 1, 1))
    assert month_range(2026, 2) == (utc(2026, 2, 1), utc(2026, 3, 1))


def test_add_months_clamps_day() -> None:
    assert add_months(utc(2026, 1, 31), 1) == utc(2026, 2, 28)
    assert add_months(utc(2028, 1, 31), 1) == utc(2028, 2, 29)
    assert add_months(utc(2026, 11, 15), 3) == utc(2027, 2, 15)


@pytest.mark.parametrize(
    "period,start",
    [
        (Period.DAILY, utc(2026, 10, 15)),
        (Period.WEEKLY, utc(2026, 10, 12)),
        (Period.BIWEEKLY, utc(2026, 10, 2)),
        (Period.MONTHLY, utc(2026, 10, 1)),
        (Period.QUARTERLY, utc(2026, 10, 1)),
        (Period.YEARLY, utc(2026, 1, 1)),
    ],
)
def test_period_range(period, start) -> None:
    # Thursday
    today = utc(2026, 10, 15, 18, 30)
    assert period_range(period, today) == (start, utc(2026, 10, 16))


def test_quarter_start() -> None:
    assert period_range(Period.QUARTERLY, utc(2026, 8, 20))[0] == utc(2026, 7, 1)


@pytest.mark.parametrize(
    "frequency,expected",
    [
        (Period.DAILY, utc(2026, 2, 1)),
        (Period.WEEKLY, utc(2026, 2, 7)),
        (Period.BIWEEKLY, utc(2026, 2, 14)),
        (Period.MONTHLY, utc(2026, 2, 28)),
        (Period.QUARTERLY, utc(2026, 4, 30)),
        (Period.YEARLY, utc(2027, 1, 31)),
    ],
)
def test_next_occurrence(frequency, expected) -> None:
    assert next_occurrence(utc(2026, 1, 31), frequency) == expected
