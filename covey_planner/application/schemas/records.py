"""Pydantic row schemas: the validation boundary between stored rows and entities.

Every row that crosses the RemoteStore or LocalCache boundary is parsed by
one of these models before it becomes a domain entity. Rows missing a
required field, or carrying a value of the wrong shape, are rejected here
rather than leaking ``None`` into the collection.

Row columns use the entity field names, except that the owner is stored in
``user_id`` (the entity calls it ``owner_id``).
"""

import datetime as dt
from dataclasses import fields
from typing import Any, ClassVar

from pydantic import BaseModel, Field, field_validator, model_validator

from covey_planner.domain.entities import (
    WEEKDAYS,
    BigRock,
    DailyPlan,
    Dimension,
    DimensionGoal,
    Goal,
    Meeting,
    MissionItem,
    Quadrant,
    Ritual,
    RitualCompletion,
    Role,
    RoleGoal,
    Task,
    TimeBlock,
    Timeframe,
    WeeklyBigRock,
    WeeklyPlan,
)


_CLOCK_TIME = r"^([01]\d|2[0-3]):[0-5]\d$"


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class RecordRow(BaseModel):
    """Columns shared by every synced table."""

    entity_class: ClassVar[type] = object

    id: str = Field(..., min_length=1, max_length=36)
    user_id: str = Field(..., min_length=1, max_length=255)
    created_at: dt.datetime = Field(default_factory=_utcnow)
    updated_at: dt.datetime = Field(default_factory=_utcnow)

    model_config = {
        "extra": "ignore",
        "str_strip_whitespace": True,
    }

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: dt.datetime) -> dt.datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=dt.timezone.utc)
        return value.astimezone(dt.timezone.utc)

    def to_entity(self) -> Any:
        """Map row → domain entity."""
        data = {name: getattr(self, name) for name in type(self).model_fields}
        data["owner_id"] = data.pop("user_id")
        return self.entity_class(**data)

    @classmethod
    def from_entity(cls, entity: Any) -> "RecordRow":
        """Map domain entity → row. Derived (non-persisted) fields are dropped."""
        data = {
            f.name: getattr(entity, f.name)
            for f in fields(entity)
            if f.name in cls.model_fields or f.name == "owner_id"
        }
        data["user_id"] = data.pop("owner_id")
        return cls.model_validate(data)

    def to_row(self) -> dict[str, Any]:
        """JSON-ready row for the store or the cache."""
        return self.model_dump(mode="json")


class TaskRow(RecordRow):
    entity_class: ClassVar[type] = Task

    title: str = Field(..., min_length=1, max_length=500)
    description: str = ""
    quadrant: Quadrant = Quadrant.Q2
    role_id: str | None = None
    completed: bool = False
    time_spent: int = Field(0, ge=0)
    due_date: dt.date | None = None
    is_ritual: bool = False
    is_big_rock: bool = False
    priority: str = ""

    @field_validator("description", "priority", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class RitualRow(RecordRow):
    entity_class: ClassVar[type] = Ritual

    title: str = Field(..., min_length=1, max_length=500)
    description: str = ""
    time_of_day: str = "morning"
    category: str = "general"
    days_of_week: list[str] = Field(default_factory=lambda: list(WEEKDAYS[:5]))

    @field_validator("description", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("days_of_week")
    @classmethod
    def _known_weekdays(cls, value: list[str]) -> list[str]:
        days = [d.strip().lower() for d in value]
        unknown = [d for d in days if d not in WEEKDAYS]
        if unknown:
            raise ValueError(f"unknown weekday(s): {', '.join(unknown)}")
        return days


class RitualCompletionRow(RecordRow):
    entity_class: ClassVar[type] = RitualCompletion

    ritual_id: str = Field(..., min_length=1, max_length=36)
    date: dt.datetime

    @field_validator("date")
    @classmethod
    def _as_local_wall_time(cls, value: dt.datetime) -> dt.datetime:
        # Completion days are stored as naive local noon.
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value


class BigRockRow(RecordRow):
    entity_class: ClassVar[type] = BigRock

    title: str = Field(..., min_length=1, max_length=500)
    description: str = ""
    timeframe: Timeframe = Timeframe.WEEKLY
    priority: int = Field(1, ge=1)
    completed: bool = False
    due_date: dt.date | None = None
    task_id: str | None = None

    @field_validator("description", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class RoleRow(RecordRow):
    entity_class: ClassVar[type] = Role

    name: str = Field(..., min_length=1, max_length=255)
    color: str = "#3b82f6"
    description: str = ""


class GoalRow(RecordRow):
    entity_class: ClassVar[type] = Goal

    title: str = Field(..., min_length=1, max_length=500)
    description: str = ""
    deadline: dt.date | None = None
    timeframe: str = "quarterly"
    role_id: str | None = None


class MeetingRow(RecordRow):
    entity_class: ClassVar[type] = Meeting

    title: str = Field(..., min_length=1, max_length=500)
    date: dt.date
    description: str = ""
    time: str = Field("09:00", pattern=r"^\d{2}:\d{2}$")
    duration: int = Field(30, ge=0)


# ── Mission and renewal lists ───────────────────────────────────────


class MissionItemRow(RecordRow):
    entity_class: ClassVar[type] = MissionItem

    title: str = Field(..., min_length=1, max_length=500)
    type: str = Field("mission", min_length=1, max_length=50)
    priority: int = Field(1, ge=1)
    completed: bool = False
    ritual_type: str | None = None
    start_time: str | None = Field(None, pattern=_CLOCK_TIME)
    end_time: str | None = Field(None, pattern=_CLOCK_TIME)
    task_id: str | None = None


class RoleGoalRow(RecordRow):
    entity_class: ClassVar[type] = RoleGoal

    role_id: str = Field(..., min_length=1, max_length=36)
    title: str = Field(..., min_length=1, max_length=500)
    description: str = ""
    completed: bool = False

    @field_validator("description", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class DimensionGoalRow(RecordRow):
    entity_class: ClassVar[type] = DimensionGoal

    dimension: Dimension
    title: str = Field(..., min_length=1, max_length=500)
    description: str = ""
    progress: int = Field(0, ge=0, le=100)

    @field_validator("description", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


# ── Weekly planner ──────────────────────────────────────────────────


class WeeklyPlanRow(RecordRow):
    entity_class: ClassVar[type] = WeeklyPlan

    week_start_date: dt.date
    week_end_date: dt.date
    theme: str = ""
    reflection: str = ""

    @field_validator("theme", "reflection", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @model_validator(mode="after")
    def _spans_one_week(self) -> "WeeklyPlanRow":
        if self.week_start_date.weekday() != 0:
            raise ValueError("week_start_date must be a Monday")
        if self.week_end_date != self.week_start_date + dt.timedelta(days=6):
            raise ValueError("week_end_date must be the Sunday after week_start_date")
        return self


class DailyPlanRow(RecordRow):
    entity_class: ClassVar[type] = DailyPlan

    weekly_plan_id: str = Field(..., min_length=1, max_length=36)
    date: dt.date
    morning_review: str = ""
    evening_reflection: str = ""

    @field_validator("morning_review", "evening_reflection", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class WeeklyBigRockRow(RecordRow):
    entity_class: ClassVar[type] = WeeklyBigRock

    weekly_plan_id: str = Field(..., min_length=1, max_length=36)
    title: str = Field(..., min_length=1, max_length=500)
    description: str = ""
    role_id: str | None = None
    quadrant: Quadrant = Quadrant.Q2
    priority: int = Field(1, ge=1)
    completed: bool = False
    task_id: str | None = None

    @field_validator("description", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class TimeBlockRow(RecordRow):
    entity_class: ClassVar[type] = TimeBlock

    daily_plan_id: str = Field(..., min_length=1, max_length=36)
    title: str = Field(..., min_length=1, max_length=500)
    start_time: str = Field(..., pattern=_CLOCK_TIME)
    end_time: str = Field(..., pattern=_CLOCK_TIME)
    description: str = ""
    category: str = ""
    completed: bool = False
    task_id: str | None = None

    @field_validator("description", "category", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @model_validator(mode="after")
    def _ends_after_start(self) -> "TimeBlockRow":
        # Zero-padded HH:MM strings order the same way as the times they name.
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self
