"""
Calendar-day helpers.

Bookings are stored as whole calendar days. Every value coming from a client
is reduced to its ``YYYY-MM-DD`` part before any comparison so that a browser
in UTC-5 and one in UTC+1 agree on which day a rental starts.
"""

from datetime import date, datetime, time, timedelta, timezone as dt_timezone
from typing import Iterator, Union

DateLike = Union[date, datetime, str]

DISPLAY_FORMAT = '%b %d, %Y'


def parse_ymd(value: DateLike) -> date:
    """
    Return the calendar day named by ``value``.

    Strings are split on ``T`` and only the date part is read, so
    ``2025-11-03T23:30:00-05:00`` is 3 November regardless of the offset.
    Aware datetimes are converted to UTC first.

    Raises:
        ValueError: If the value cannot be read as a date.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(dt_timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid date: {value!r}")

    date_part = value.strip().split('T')[0].split(' ')[0]
    try:
        year, month, day = (int(part) for part in date_part.split('-'))
        return date(year, month, day)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid date: {value!r}")


def to_utc_midnight(value: DateLike) -> datetime:
    """Return 00:00 UTC of the calendar day named by ``value``."""
    return datetime.combine(parse_ymd(value), time.min, tzinfo=dt_timezone.utc)


def format_date_iso(value: DateLike) -> str:
    return parse_ymd(value).isoformat()


def to_local_date_string(value: DateLike) -> str:
    """Display form used in messages and receipts, e.g. ``Nov 03, 2025``."""
    return parse_ymd(value).strftime(DISPLAY_FORMAT)


def utc_today() -> date:
    return datetime.now(dt_timezone.utc).date()


def add_days(value: DateLike, days: int) -> date:
    return parse_ymd(value) + timedelta(days=days)


def add_one_day(value: DateLike) -> date:
    """Turn an inclusive end day into the exclusive end used by all-day calendar events."""
    return add_days(value, 1)


def ranges_overlap(start1: DateLike, end1: DateLike, start2: DateLike, end2: DateLike) -> bool:
    """
    Inclusive overlap of two day ranges.

    A booking ending on the 5th and another starting on the 5th overlap;
    one ending on the 5th and another starting on the 6th do not.
    """
    return parse_ymd(start1) <= parse_ymd(end2) and parse_ymd(start2) <= parse_ymd(end1)


def iter_days(start: DateLike, end: DateLike) -> Iterator[date]:
    """Yield every day from ``start`` to ``end`` inclusive."""
    current = parse_ymd(start)
    last = parse_ymd(end)
    while current <= last:
        yield current
        current += timedelta(days=1)
