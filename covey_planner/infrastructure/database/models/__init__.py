from .records import (
    RECORD_MODELS,
    BigRockModel,
    DailyPlanModel,
    DimensionGoalModel,
    GoalModel,
    MeetingModel,
    MissionItemModel,
    RitualCompletionModel,
    RitualModel,
    RoleGoalModel,
    RoleModel,
    TaskModel,
    TimeBlockModel,
    WeeklyBigRockModel,
    WeeklyPlanModel,
)

__all__ = [
    "RECORD_MODELS",
    "BigRockModel",
    "DailyPlanModel",
    "DimensionGoalModel",
    "GoalModel",
    "MeetingModel",
    "MissionItemModel",
    "RitualCompletionModel",
    "RitualModel",
    "RoleGoalModel",
    "RoleModel",
    "TaskModel",
    "TimeBlockModel",
    "WeeklyBigRockModel",
    "WeeklyPlanModel",
]
