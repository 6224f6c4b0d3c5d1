from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterator, Tuple, Union

from ..core.exceptions import ValidationError

DateLike = Union[date, datetime, str]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip()[:10], "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def to_calendar_date(value: DateLike) -> date:
    """Drop any time-of-day component so comparisons run on calendar dates."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_iso_date(value)
    raise TypeError(f"Unsupported date value type: {type(value)!r}")


def month_bounds(day: date) -> Tuple[date, date]:
    """First and last calendar day of ``day``'s month."""
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def window_start(today: date, window_days: int) -> date:
    return today - timedelta(days=window_days - 1)


def iter_days(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return date.today()


def now_local() -> datetime:
    return datetime.now()
