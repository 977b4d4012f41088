"""Table descriptors: which row schema, ordering and links each synced table uses."""

from dataclasses import dataclass

from covey_planner.application.interfaces.remote_store import OrderBy
from covey_planner.application.schemas.records import (
    BigRockRow,
    DailyPlanRow,
    DimensionGoalRow,
    GoalRow,
    MeetingRow,
    MissionItemRow,
    RecordRow,
    RitualCompletionRow,
    RitualRow,
    RoleGoalRow,
    RoleRow,
    TaskRow,
    TimeBlockRow,
    WeeklyBigRockRow,
    WeeklyPlanRow,
)
from covey_planner.domain.exceptions import UnknownTableError

NEWEST_FIRST = OrderBy("created_at", descending=True)


@dataclass(frozen=True)
class EntityLink:
    """A foreign id on an entity whose target is deleted along with it."""

    field: str
    table: str


@dataclass(frozen=True)
class RecordDescriptor:
    """Everything a SyncedCollection needs to know about one table."""

    table: str
    label: str
    row_schema: type[RecordRow]
    order: OrderBy = NEWEST_FIRST
    links: tuple[EntityLink, ...] = ()


TASKS = RecordDescriptor("tasks", "Task", TaskRow)
RITUALS = RecordDescriptor("rituals", "Ritual", RitualRow)
RITUAL_COMPLETIONS = RecordDescriptor(
    "ritual_completions",
    "Ritual completion",
    RitualCompletionRow,
    order=OrderBy("date", descending=True),
)
BIG_ROCKS = RecordDescriptor(
    "big_rocks",
    "Big rock",
    BigRockRow,
    order=OrderBy("priority"),
    links=(EntityLink(field="task_id", table="tasks"),),
)
ROLES = RecordDescriptor("roles", "Role", RoleRow)
GOALS = RecordDescriptor("goals", "Goal", GoalRow)
MEETINGS = RecordDescriptor("meetings", "Meeting", MeetingRow, order=OrderBy("date"))
MISSION_ITEMS = RecordDescriptor(
    "mission_items",
    "Mission item",
    MissionItemRow,
    order=OrderBy("priority"),
    links=(EntityLink(field="task_id", table="tasks"),),
)
ROLE_GOALS = RecordDescriptor("role_goals", "Role goal", RoleGoalRow)
DIMENSION_GOALS = RecordDescriptor("dimension_goals", "Dimension goal", DimensionGoalRow)

WEEKLY_PLANS = RecordDescriptor(
    "weekly_plans",
    "Weekly plan",
    WeeklyPlanRow,
    order=OrderBy("week_start_date", descending=True),
)
DAILY_PLANS = RecordDescriptor("daily_plans", "Daily plan", DailyPlanRow, order=OrderBy("date"))
WEEKLY_BIG_ROCKS = RecordDescriptor(
    "weekly_big_rocks",
    "Weekly big rock",
    WeeklyBigRockRow,
    order=OrderBy("priority"),
    links=(EntityLink(field="task_id", table="tasks"),),
)
# A time block only references its task; deleting the block leaves the task.
TIME_BLOCKS = RecordDescriptor(
    "time_blocks", "Time block", TimeBlockRow, order=OrderBy("start_time")
)

RECORD_DESCRIPTORS: dict[str, RecordDescriptor] = {
    d.table: d
    for d in (
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
    )
}


def get_descriptor(table: str) -> RecordDescriptor:
    try:
        return RECORD_DESCRIPTORS[table]
    except KeyError:
        raise UnknownTableError(table) from None
