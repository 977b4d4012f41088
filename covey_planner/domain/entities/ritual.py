"""Domain entities for recurring rituals and their daily completion records."""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import ClassVar

from covey_planner.domain.ids import new_id

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)
DEFAULT_DAYS_OF_WEEK = WEEKDAYS[:5]


def normalize_completion_date(day: date | datetime) -> datetime:
    """Pin a calendar day to local noon so timezone shifts never move it."""
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, time(12, 0))


@dataclass
class Ritual:
    """A recurring habit tracked through daily completion records.

    ``streak`` and ``longest_streak`` are derived from the completion
    history; they are recomputed locally and never persisted.
    """

    derived_fields: ClassVar[tuple[str, ...]] = ("streak", "longest_streak")

    title: str
    owner_id: str
    id: str = field(default_factory=new_id)
    description: str = ""
    time_of_day: str = "morning"
    category: str = "general"
    days_of_week: list[str] = field(default_factory=lambda: list(DEFAULT_DAYS_OF_WEEK))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    streak: int = 0
    longest_streak: int = 0

    def is_scheduled_on(self, day: date) -> bool:
        """True if the ritual is due on *day*; an empty schedule means every day."""
        if not self.days_of_week:
            return True
        return WEEKDAYS[day.weekday()] in self.days_of_week


@dataclass
class RitualCompletion:
    """Marks one ritual as done on one calendar day."""

    ritual_id: str
    owner_id: str
    date: datetime
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def day(self) -> date:
        return self.date.date()
