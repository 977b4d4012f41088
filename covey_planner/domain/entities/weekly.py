"""Domain entities for the weekly planner: week and day plans, weekly rocks and time blocks."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone

from covey_planner.domain.entities.task import Quadrant
from covey_planner.domain.ids import new_id


def week_bounds(day: date) -> tuple[date, date]:
    """Monday and Sunday of the week containing *day*."""
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


@dataclass
class WeeklyPlan:
    """One user's plan for one Monday-to-Sunday week."""

    owner_id: str
    week_start_date: date
    week_end_date: date
    id: str = field(default_factory=new_id)
    theme: str = ""
    reflection: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def days(self) -> list[date]:
        return [self.week_start_date + timedelta(days=n) for n in range(7)]


@dataclass
class DailyPlan:
    owner_id: str
    weekly_plan_id: str
    date: date
    id: str = field(default_factory=new_id)
    morning_review: str = ""
    evening_reflection: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class WeeklyBigRock:
    """A big rock committed to for one week.

    When ``task_id`` is set, deleting the rock also deletes that task.
    """

    title: str
    owner_id: str
    weekly_plan_id: str
    id: str = field(default_factory=new_id)
    description: str = ""
    role_id: str | None = None
    quadrant: Quadrant = Quadrant.Q2
    priority: int = 1
    completed: bool = False
    task_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class TimeBlock:
    """A stretch of one day reserved for an activity; times are ``HH:MM``."""

    title: str
    owner_id: str
    daily_plan_id: str
    start_time: str
    end_time: str
    id: str = field(default_factory=new_id)
    description: str = ""
    category: str = ""
    completed: bool = False
    task_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
