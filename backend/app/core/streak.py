"""
Duet Backend — Streak Calculator
==================================

What:  Counts consecutive UTC days with at least one app open.
How:   Events are reduced to distinct UTC days. Counting starts today if the
       user has opened the app today, otherwise yesterday (so a streak
       survives until the end of the day), then walks backward until the
       first missing day.
Who:   StreakService and HomeService.

All comparisons use UTC calendar days; users in other timezones are judged
against the same UTC day.
"""

import calendar
from datetime import MAXYEAR, MINYEAR, date, timedelta
from typing import Iterable, List, Optional, Set, Tuple

from app.core.dates import DateLike, distinct_days, to_utc_date


def streak_from_days(days: Set[date], today: date) -> int:
    """Length of the run of consecutive days ending today or yesterday."""
    current = today if today in days else today - timedelta(days=1)
    streak = 0
    while current in days:
        streak += 1
        current -= timedelta(days=1)
    return streak


def calculate_streak(opened_at: Iterable[DateLike], now: DateLike) -> int:
    """
    Streak count for one user's app-open timestamps, evaluated at `now`.

    A user with no events has a streak of 0.
    """
    return streak_from_days(distinct_days(opened_at), to_utc_date(now))


def combined_streak(user1_streak: int, user2_streak: Optional[int]) -> int:
    """A pair's streak is only as long as the weaker partner's."""
    if user2_streak is None:
        return user1_streak
    return min(user1_streak, user2_streak)


def week_dates(today: DateLike) -> List[date]:
    """Monday through Sunday of the UTC week containing `today`."""
    d = to_utc_date(today)
    monday = d - timedelta(days=d.weekday())
    return [monday + timedelta(days=i) for i in range(7)]


def parse_month(month: Optional[str], today: DateLike) -> Tuple[int, int]:
    """
    Parse an `MM-YYYY` month filter into (year, month).

    Falls back to the month of `today` when no filter is given.

    Raises:
        ValueError: The filter is not `MM-YYYY` or the month is out of range.
    """
    if not month:
        d = to_utc_date(today)
        return d.year, d.month

    parts = month.split("-")
    if len(parts) != 2:
        raise ValueError("Invalid month format. Expected MM-YYYY")
    try:
        month_num = int(parts[0])
        year_num = int(parts[1])
    except ValueError:
        raise ValueError("Invalid month or year value") from None
    if not 1 <= month_num <= 12 or not MINYEAR <= year_num <= MAXYEAR:
        raise ValueError("Invalid month or year value")
    return year_num, month_num


def month_dates(year: int, month: int) -> List[date]:
    days_in_month = calendar.monthrange(year, month)[1]
    return [date(year, month, day) for day in range(1, days_in_month + 1)]
