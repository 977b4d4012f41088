"""SQLAlchemy ORM models for the synced planner tables.

Every table carries ``id`` (client-generated), the owning ``user_id`` and
the two timestamps; the remaining columns mirror the row schemas.
"""

import datetime as dt

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from covey_planner.infrastructure.database.base import Base


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class RecordColumnsMixin:
    """Columns shared by every synced table."""

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id}, user_id='{self.user_id}')>"


class TaskModel(RecordColumnsMixin, Base):
    """ORM model: maps to the 'tasks' table."""

    __tablename__ = "tasks"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    quadrant: Mapped[str] = mapped_column(String(2), nullable=False, default="q2")
    role_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    time_spent: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    due_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    is_ritual: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_big_rock: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    priority: Mapped[str] = mapped_column(String(50), nullable=False, default="")

    __table_args__ = (Index("ix_tasks_user_quadrant", "user_id", "quadrant"),)


class RitualModel(RecordColumnsMixin, Base):
    """ORM model: maps to the 'rituals' table."""

    __tablename__ = "rituals"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    time_of_day: Mapped[str] = mapped_column(String(50), nullable=False, default="morning")
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="general")
    days_of_week: Mapped[list] = mapped_column(JSON, nullable=False, default=list)


class RitualCompletionModel(RecordColumnsMixin, Base):
    """ORM model: maps to the 'ritual_completions' table.

    ``date`` is the completed day pinned to local noon (no time zone).
    """

    __tablename__ = "ritual_completions"

    ritual_id: Mapped[str] = mapped_column(String(36), nullable=False)
    date: Mapped[dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False)

    __table_args__ = (
        UniqueConstraint("ritual_id", "date", name="uq_ritual_completions_day"),
        Index("ix_ritual_completions_ritual", "ritual_id"),
    )


class BigRockModel(RecordColumnsMixin, Base):
    """ORM model: maps to the 'big_rocks' table."""

    __tablename__ = "big_rocks"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    timeframe: Mapped[str] = mapped_column(String(20), nullable=False, default="weekly")
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    due_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    task_id: Mapped[str | None] = mapped_column(String(36), nullable=True)


class RoleModel(RecordColumnsMixin, Base):
    """ORM model: maps to the 'roles' table."""

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    color: Mapped[str] = mapped_column(String(20), nullable=False, default="#3b82f6")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")


class GoalModel(RecordColumnsMixin, Base):
    """ORM model: maps to the 'goals' table."""

    __tablename__ = "goals"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    deadline: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    timeframe: Mapped[str] = mapped_column(String(20), nullable=False, default="quarterly")
    role_id: Mapped[str | None] = mapped_column(String(36), nullable=True)


class MeetingModel(RecordColumnsMixin, Base):
    """ORM model: maps to the 'meetings' table."""

    __tablename__ = "meetings"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    time: Mapped[str] = mapped_column(String(5), nullable=False, default="09:00")
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=30)


class MissionItemModel(RecordColumnsMixin, Base):
    """ORM model: maps to the 'mission_items' table."""

    __tablename__ = "mission_items"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False, default="mission")
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ritual_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    start_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    end_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    task_id: Mapped[str | None] = mapped_column(String(36), nullable=True)


class RoleGoalModel(RecordColumnsMixin, Base):
    """ORM model: maps to the 'role_goals' table."""

    __tablename__ = "role_goals"

    role_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class DimensionGoalModel(RecordColumnsMixin, Base):
    """ORM model: maps to the 'dimension_goals' table."""

    __tablename__ = "dimension_goals"

    dimension: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


# ── Weekly planner ──────────────────────────────────────────────────


class WeeklyPlanModel(RecordColumnsMixin, Base):
    """ORM model: maps to the 'weekly_plans' table. One plan per owner and week."""

    __tablename__ = "weekly_plans"

    week_start_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    week_end_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    theme: Mapped[str] = mapped_column(Text, nullable=False, default="")
    reflection: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (
        UniqueConstraint("user_id", "week_start_date", name="uq_weekly_plans_week"),
    )


class DailyPlanModel(RecordColumnsMixin, Base):
    """ORM model: maps to the 'daily_plans' table. One plan per owner and day."""

    __tablename__ = "daily_plans"

    weekly_plan_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    morning_review: Mapped[str] = mapped_column(Text, nullable=False, default="")
    evening_reflection: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_daily_plans_day"),)


class WeeklyBigRockModel(RecordColumnsMixin, Base):
    """ORM model: maps to the 'weekly_big_rocks' table."""

    __tablename__ = "weekly_big_rocks"

    weekly_plan_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    role_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    quadrant: Mapped[str] = mapped_column(String(2), nullable=False, default="q2")
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    task_id: Mapped[str | None] = mapped_column(String(36), nullable=True)


class TimeBlockModel(RecordColumnsMixin, Base):
    """ORM model: maps to the 'time_blocks' table. Times are HH:MM strings."""

    __tablename__ = "time_blocks"

    daily_plan_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    task_id: Mapped[str | None] = mapped_column(String(36), nullable=True)


RECORD_MODELS: dict[str, type[RecordColumnsMixin]] = {
    model.__tablename__: model
    for model in (
        TaskModel,
        RitualModel,
        RitualCompletionModel,
        BigRockModel,
        RoleModel,
        GoalModel,
        MeetingModel,
        MissionItemModel,
        RoleGoalModel,
        DimensionGoalModel,
        WeeklyPlanModel,
        DailyPlanModel,
        WeeklyBigRockModel,
        TimeBlockModel,
    )
}
