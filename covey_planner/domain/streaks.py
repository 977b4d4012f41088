"""Streak and completion-rate calculation over ritual completion history.

All functions are pure: they depend only on the completion dates passed in
and the ``today`` reference day, so they can be recomputed on every load or
change without hidden state.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from covey_planner.domain.entities.ritual import WEEKDAYS

DateLike = date | datetime | str


@dataclass(frozen=True)
class MonthlyStats:
    """Scheduled-day completion rate for the month containing ``today``."""

    completed: int
    total: int
    percentage: int


def date_key(value: DateLike) -> str:
    """Normalize a completion date to its ``yyyy-MM-dd`` key."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value.split("T")[0].strip()


def _to_day(value: DateLike) -> date:
    return date.fromisoformat(date_key(value))


def completion_keys(dates: Iterable[DateLike]) -> set[str]:
    return {date_key(d) for d in dates}


def current_streak(dates: Iterable[DateLike], today: date | None = None) -> int:
    """Count consecutive completed days ending today.

    A missing completion for today does not break the streak yet: the count
    then starts from yesterday.
    """
    keys = completion_keys(dates)
    day = today or date.today()
    if day.isoformat() not in keys:
        day -= timedelta(days=1)

    streak = 0
    while day.isoformat() in keys:
        streak += 1
        day -= timedelta(days=1)
    return streak


def longest_streak(dates: Iterable[DateLike]) -> int:
    """Length of the longest run of consecutive completed days."""
    days = sorted({_to_day(d) for d in dates})
    longest = 0
    run = 0
    previous: date | None = None
    for day in days:
        if previous is not None and (day - previous).days == 1:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day
    return longest


def monthly_completion_rate(
    dates: Iterable[DateLike],
    days_of_week: Iterable[str] | None = None,
    today: date | None = None,
) -> MonthlyStats:
    """Completion rate over the scheduled days elapsed so far this month.

    ``days_of_week`` holds lowercase weekday names; empty or None means the
    ritual is scheduled every day.
    """
    today = today or date.today()
    schedule = set(days_of_week or ()) or set(WEEKDAYS)
    month_start = today.replace(day=1)

    scheduled: set[date] = set()
    day = month_start
    while day <= today:
        if WEEKDAYS[day.weekday()] in schedule:
            scheduled.add(day)
        day += timedelta(days=1)

    done = {_to_day(d) for d in dates} & scheduled
    total = len(scheduled)
    percentage = round(len(done) / total * 100) if total else 0
    return MonthlyStats(completed=len(done), total=total, percentage=percentage)
