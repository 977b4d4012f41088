"""Domain entity for tasks placed on the Covey quadrant board."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum

from covey_planner.domain.ids import new_id


class Quadrant(str, Enum):
    """The four urgency/importance buckets of the time-management matrix."""

    Q1 = "q1"  # urgent + important
    Q2 = "q2"  # important, not urgent
    Q3 = "q3"  # urgent, not important
    Q4 = "q4"  # neither

    @classmethod
    def classify(cls, *, urgent: bool, important: bool) -> "Quadrant":
        if important:
            return cls.Q1 if urgent else cls.Q2
        return cls.Q3 if urgent else cls.Q4

    @property
    def is_urgent(self) -> bool:
        return self in (Quadrant.Q1, Quadrant.Q3)

    @property
    def is_important(self) -> bool:
        return self in (Quadrant.Q1, Quadrant.Q2)


@dataclass
class Task:
    """Core domain entity for a single task."""

    title: str
    owner_id: str
    id: str = field(default_factory=new_id)
    description: str = ""
    quadrant: Quadrant = Quadrant.Q2
    role_id: str | None = None
    completed: bool = False
    time_spent: int = 0  # seconds
    due_date: date | None = None
    is_ritual: bool = False
    is_big_rock: bool = False
    priority: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
