"""Domain entities for roles, goals, meetings and the mission and renewal lists."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum

from covey_planner.domain.ids import new_id


@dataclass
class Role:
    """A life role (parent, manager, friend...) that tasks and goals hang off."""

    name: str
    owner_id: str
    id: str = field(default_factory=new_id)
    color: str = "#3b82f6"
    description: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class Goal:
    title: str
    owner_id: str
    id: str = field(default_factory=new_id)
    description: str = ""
    deadline: date | None = None
    timeframe: str = "quarterly"
    role_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class Meeting:
    title: str
    owner_id: str
    date: date
    id: str = field(default_factory=new_id)
    description: str = ""
    time: str = "09:00"
    duration: int = 30  # minutes
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class Dimension(str, Enum):
    """The four dimensions of renewal ("sharpening the saw")."""

    PHYSICAL = "physical"
    MENTAL = "mental"
    SOCIAL = "social"
    SPIRITUAL = "spiritual"


@dataclass
class MissionItem:
    """One line of the personal mission statement, optionally backed by a task."""

    title: str
    owner_id: str
    id: str = field(default_factory=new_id)
    type: str = "mission"
    priority: int = 1
    completed: bool = False
    ritual_type: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    task_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class RoleGoal:
    title: str
    owner_id: str
    role_id: str
    id: str = field(default_factory=new_id)
    description: str = ""
    completed: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class DimensionGoal:
    title: str
    owner_id: str
    dimension: Dimension
    id: str = field(default_factory=new_id)
    description: str = ""
    progress: int = 0  # percent
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
