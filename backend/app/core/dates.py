"""
Duet Backend — UTC Day Helpers
================================

What:  Day-boundary primitives shared by the streak and rotation rules.
How:   Every instant is reduced to its UTC calendar date; naive datetimes
       coming back from the database are taken to already be UTC.
"""

from datetime import date, datetime, timezone
from typing import Iterable, Set, Union

DateLike = Union[date, datetime]


def utc_now() -> datetime:
    """The clock collaborator. Read once per computation and pass it down."""
    return datetime.now(timezone.utc)


def to_utc_date(value: DateLike) -> date:
    """Truncate an instant to its UTC year/month/day."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def distinct_days(values: Iterable[DateLike]) -> Set[date]:
    return {to_utc_date(v) for v in values}


def days_between(start: DateLike, end: DateLike) -> int:
    """Whole UTC days from `start` to `end` (negative if `end` is earlier)."""
    return (to_utc_date(end) - to_utc_date(start)).days
