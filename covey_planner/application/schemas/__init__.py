from .records import (
    RecordRow,
    TaskRow,
    RitualRow,
    RitualCompletionRow,
    BigRockRow,
    RoleRow,
    GoalRow,
    MeetingRow,
    MissionItemRow,
    RoleGoalRow,
    DimensionGoalRow,
    WeeklyPlanRow,
    DailyPlanRow,
    WeeklyBigRockRow,
    TimeBlockRow,
)
from .tables import (
    EntityLink,
    RecordDescriptor,
    RECORD_DESCRIPTORS,
    TASKS,
    RITUALS,
    RITUAL_COMPLETIONS,
    BIG_ROCKS,
    ROLES,
    GOALS,
    MEETINGS,
    MISSION_ITEMS,
    ROLE_GOALS,
    DIMENSION_GOALS,
    WEEKLY_PLANS,
    DAILY_PLANS,
    WEEKLY_BIG_ROCKS,
    TIME_BLOCKS,
    get_descriptor,
)

__all__ = [
    "RecordRow",
    "TaskRow",
    "RitualRow",
    "RitualCompletionRow",
    "BigRockRow",
    "RoleRow",
    "GoalRow",
    "MeetingRow",
    "MissionItemRow",
    "RoleGoalRow",
    "DimensionGoalRow",
    "WeeklyPlanRow",
    "DailyPlanRow",
    "WeeklyBigRockRow",
    "TimeBlockRow",
    "EntityLink",
    "RecordDescriptor",
    "RECORD_DESCRIPTORS",
    "TASKS",
    "RITUALS",
    "RITUAL_COMPLETIONS",
    "BIG_ROCKS",
    "ROLES",
    "GOALS",
    "MEETINGS",
    "MISSION_ITEMS",
    "ROLE_GOALS",
    "DIMENSION_GOALS",
    "WEEKLY_PLANS",
    "DAILY_PLANS",
    "WEEKLY_BIG_ROCKS",
    "TIME_BLOCKS",
    "get_descriptor",
]
