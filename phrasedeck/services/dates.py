"""
dates.py
Calendar primitives used by the scheduler.

Weekdays are integers 0=Sunday .. 6=Saturday everywhere: here, in the
`learn_days`/`review_days` tables and in the API.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional, Union

DateLike = Union[date, str, None]

SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)
WEEKDAYS = range(7)


def _today(today: Optional[date]) -> date:
    return today if today is not None else date.today()


def parse_date(value: DateLike) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, date):
        return value
    text = value.strip()
    if not text or text.upper() == "NULL":
        return None
    # Accept full timestamps too, only the date part matters.
    return date.fromisoformat(text[:10])


def weekday_of(value: date) -> int:
    return value.isoweekday() % 7


def todays_weekday(today: Optional[date] = None) -> int:
    return weekday_of(_today(today))


def add_days(value: DateLike, days: int, today: Optional[date] = None) -> date:
    """Shift `value` by `days`; an absent value counts from today."""
    base = parse_date(value)
    if base is None:
        base = _today(today)
    return base + timedelta(days=days)


def next_date_for_weekday(weekday: int, today: Optional[date] = None) -> date:
    """Next `weekday` on or after today (today itself when it matches)."""
    if weekday not in WEEKDAYS:
        raise ValueError(f"weekday must be in 0..6, got {weekday!r}")
    current = _today(today)
    offset = (weekday - weekday_of(current) + 7) % 7
    return current + timedelta(days=offset)


def is_before_today(value: DateLike, today: Optional[date] = None) -> bool:
    parsed = parse_date(value)
    if parsed is None:
        return False
    return parsed < _today(today)
