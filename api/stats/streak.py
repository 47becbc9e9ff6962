"""
Consecutive-day streak calculation.

A streak is the number of consecutive calendar days, ending today or
yesterday, on which at least one entry was logged. "Yesterday" counts as a
grace day so the streak stays alive until the user's local midnight passes
without a new entry.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta

ONE_DAY = timedelta(days=1)


def _as_date(value: date | datetime) -> date:
    # datetime is a subclass of date; drop the time component explicitly.
    if isinstance(value, datetime):
        return value.date()
    return value


def streak_anchor(days: set[date], today: date) -> date | None:
    """
    Return the day the streak walk starts from, or None when it is broken.
    """
    if today in days:
        return today
    yesterday = today - ONE_DAY
    if yesterday in days:
        return yesterday
    return None


def compute_streak(dates: Iterable[date | datetime], today: date | datetime) -> int:
    """
    Count consecutive logged days ending at `today` (or yesterday).

    `dates` may contain duplicates and future days; neither affects the count.
    `today` is the caller's local date, not server time.
    """
    days = {_as_date(d) for d in dates}
    if not days:
        return 0

    anchor = streak_anchor(days, _as_date(today))
    if anchor is None:
        return 0

    streak = 0
    cursor = anchor
    while cursor in days:
        streak += 1
        cursor -= ONE_DAY
    return streak
