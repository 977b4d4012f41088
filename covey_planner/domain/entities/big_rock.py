"""Domain entity for big rocks, the user's highest-priority commitments."""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum

from covey_planner.domain.ids import new_id


def _add_months(day: date, months: int) -> date:
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


class Timeframe(str, Enum):
    """Planning horizon of a big rock; determines its due date."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    def due_date_from(self, start: date) -> date:
        if self is Timeframe.DAILY:
            return start + timedelta(days=1)
        if self is Timeframe.WEEKLY:
            return start + timedelta(weeks=1)
        if self is Timeframe.MONTHLY:
            return _add_months(start, 1)
        if self is Timeframe.QUARTERLY:
            return _add_months(start, 3)
        return _add_months(start, 12)


@dataclass
class BigRock:
    """A high-priority goal, optionally linked to an ordinary task.

    When ``task_id`` is set, deleting the rock also deletes that task.
    """

    title: str
    owner_id: str
    id: str = field(default_factory=new_id)
    description: str = ""
    timeframe: Timeframe = Timeframe.WEEKLY
    priority: int = 1
    completed: bool = False
    due_date: date | None = None
    task_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
