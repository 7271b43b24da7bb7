"""
rate_core/dates.py

Calendar-date helpers. Dates are compared by calendar day only, no timezone
arithmetic.
"""
from datetime import date, datetime, timedelta
from typing import Iterator, Union

from rate_core.errors import InvalidDate, InvalidDateRange

DateLike = Union[date, str]


def to_date(value: DateLike) -> date:
    """
    Coerce an ISO-8601 calendar date (or date / datetime) to ``date``.

    Raises:
        InvalidDate: If the value cannot be parsed.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as e:
            raise InvalidDate(f"Invalid calendar date {value!r}: {e}") from e
    raise InvalidDate(f"Invalid calendar date {value!r}")


def add_days(d: date, days: int) -> date:
    """``d + days`` raising InvalidDate past the representable calendar."""
    try:
        return d + timedelta(days=days)
    except OverflowError as e:
        raise InvalidDate(f"{d.isoformat()} + {days} days is outside the supported calendar") from e


def nights_between(check_in: date, check_out: date) -> int:
    """
    Number of calendar nights between check-in and check-out.

    Raises:
        InvalidDateRange: If check-out is not after check-in.
    """
    if check_out <= check_in:
        raise InvalidDateRange(
            f"Check-out {check_out.isoformat()} must be after check-in {check_in.isoformat()}"
        )
    return (check_out - check_in).days


def iter_dates(start: date, end: date, inclusive: bool = True) -> Iterator[date]:
    """Yield each calendar date from start to end."""
    current = start
    while current < end or (inclusive and current == end):
        yield current
        if current == date.max:
            return
        current = current + timedelta(days=1)


__all__ = [
    "DateLike",
    "to_date",
    "add_days",
    "nights_between",
    "iter_dates",
]
