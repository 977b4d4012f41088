from .task import Task, Quadrant
from .ritual import Ritual, RitualCompletion, WEEKDAYS, DEFAULT_DAYS_OF_WEEK, normalize_completion_date
from .big_rock import BigRock, Timeframe
from .planning import Role, Goal, Meeting, MissionItem, RoleGoal, DimensionGoal, Dimension
from .weekly import WeeklyPlan, DailyPlan, WeeklyBigRock, TimeBlock, week_bounds
from .sync import (
    LoadResult,
    LoadSource,
    MutationResult,
    MutationState,
    SyncWarning,
    SyncWarningKind,
)

__all__ = [
    "Task",
    "Quadrant",
    "Ritual",
    "RitualCompletion",
    "WEEKDAYS",
    "DEFAULT_DAYS_OF_WEEK",
    "normalize_completion_date",
    "BigRock",
    "Timeframe",
    "Role",
    "Goal",
    "Meeting",
    "MissionItem",
    "RoleGoal",
    "DimensionGoal",
    "Dimension",
    "WeeklyPlan",
    "DailyPlan",
    "WeeklyBigRock",
    "TimeBlock",
    "week_bounds",
    "LoadResult",
    "LoadSource",
    "MutationResult",
    "MutationState",
    "SyncWarning",
    "SyncWarningKind",
]
