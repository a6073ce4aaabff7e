"""
Date and time utility functions used by the fee scheduler.

Notes:
- All "UTC" helpers use timezone-aware datetimes with `timezone.utc`.
- `to_utc` assumes naive datetimes are already in UTC and only attaches tzinfo
  (it does not perform any timezone conversion for naive datetimes).
- Calendar-month arithmetic works on explicit year/month/day parts; the
  day-of-month is clamped to the length of the target month.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Union

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

UTC = timezone.utc

# Locale-independent month names for schedule labels
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


class DateUtilsError(ValueError):
    """Custom exception for date utilities errors."""
    pass


def now_utc() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(UTC)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    - If naive, assumes it's already in UTC and only attaches tzinfo.
    - If aware, converts to UTC.
    """
    if not isinstance(dt, datetime):
        raise DateUtilsError("Input must be a datetime object")

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def coerce_date(value: Union[date, datetime, str, None]) -> date | None:
    """
    Normalize a date-ish value to a calendar date.

    Accepts dates, datetimes (their UTC calendar date) and ISO-8601 strings
    such as "2025-04-10" or "2025-04-10T00:00:00.000Z". Empty values map
    to None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_utc(value).date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            parsed = isoparse(value.strip())
        except ValueError as e:
            raise DateUtilsError(f"Invalid ISO-8601 date: {value!r}") from e
        return to_utc(parsed).date()
    raise DateUtilsError(f"Unsupported date value: {value!r}")


def add_months(dt: datetime, months: int) -> datetime:
    """
    Advance a datetime by whole calendar months.

    Year and month roll over explicitly; the day is clamped to the last
    day of the target month (Jan 31 + 1 month -> Feb 28/29). The
    time-of-day and tzinfo are preserved.
    """
    if not isinstance(dt, datetime):
        raise DateUtilsError("Input must be a datetime object")
    return dt + relativedelta(months=months)


def months_between(start: date, end: date) -> int:
    """
    Whole-month difference using only the year and month parts.

    (end.year - start.year) * 12 + (end.month - start.month); the day of
    month is ignored and the result is negative when end precedes start.
    """
    return (end.year - start.year) * 12 + (end.month - start.month)


def month_label(d: date) -> str:
    """Return a "<MonthName> <Year>" label, e.g. "March 2025"."""
    return f"{MONTH_NAMES[d.month - 1]} {d.year}"


def isoformat_utc(dt: datetime) -> str:
    """Render an instant as ISO-8601 UTC with millisecond precision and a Z suffix."""
    return to_utc(dt).isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = [
    "UTC",
    "MONTH_NAMES",
    "DateUtilsError",
    "now_utc",
    "to_utc",
    "coerce_date",
    "add_months",
    "months_between",
    "month_label",
    "isoformat_utc",
]
