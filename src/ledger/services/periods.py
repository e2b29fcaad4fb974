"""Calendar helpers for budget windows and recurring schedules.

All datetimes are timezone-aware UTC.
"""

import calendar
from datetime import datetime, timedelta, timezone

from ledger.models.enums import Period


def start_of_day(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)


def month_range(year: int, month: int) -> tuple[datetime, datetime]:
    """``[first of month, first of next month)``."""
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


def add_months(moment: datetime, months: int) -> datetime:
    """Shift by calendar months, clamping the day (Jan 31 + 1 month = Feb 28/29)."""
    index = moment.month - 1 + months
    year = moment.year + index // 12
    month = index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def period_range(period: Period, today: datetime) -> tuple[datetime, datetime]:
    """Budget window containing ``today``, as ``[start, end)``.

    The window always ends at the close of ``today``. DAILY is today, WEEKLY
    starts on Monday, BIWEEKLY covers the trailing 14 days, MONTHLY,
    QUARTERLY and YEARLY start on the first day of the calendar month,
    quarter and year.
    """
    day = start_of_day(today)
    end = day + timedelta(days=1)
    if period == Period.DAILY:
        start = day
    elif period == Period.WEEKLY:
        start = day - timedelta(days=day.weekday())
    elif period == Period.BIWEEKLY:
        start = day - timedelta(days=13)
    elif period == Period.MONTHLY:
        start = day.replace(day=1)
    elif period == Period.QUARTERLY:
        start = day.replace(month=(day.month - 1) // 3 * 3 + 1, day=1)
    elif period == Period.YEARLY:
        start = day.replace(month=1, day=1)
    else:
        raise ValueError(f"Unsupported period: {period}")
    return start, end


def next_occurrence(moment: datetime, frequency: Period) -> datetime:
    """Next due date after ``moment`` for a recurring schedule."""
    if frequency == Period.DAILY:
        return moment + timedelta(days=1)
    if frequency == Period.WEEKLY:
        return moment + timedelta(weeks=1)
    if frequency == Period.BIWEEKLY:
        return moment + timedelta(weeks=2)
    if frequency == Period.MONTHLY:
        return add_months(moment, 1)
    if frequency == Period.QUARTERLY:
        return add_months(moment, 3)
    if frequency == Period.YEARLY:
        return add_months(moment, 12)
    raise ValueError(f"Unsupported frequency: {frequency}")
