"""Unit tests for the BigRockPlanner service."""

from datetime import date

import pytest

from covey_planner.application.schemas.tables import BIG_ROCKS, TASKS
from covey_planner.application.services import BigRockPlanner, TaskBoard
from covey_planner.domain.entities import MutationState, Quadrant, SyncWarningKind, Timeframe
from covey_planner.domain.exceptions import ValidationFailedError

START = date(2026, 1, 31)


@pytest.fixture
def board(make_collection) -> TaskBoard:
    return TaskBoard(make_collection(TASKS))


@pytest.fixture
def planner(make_collection, board: TaskBoard) -> BigRockPlanner:
    return BigRockPlanner(make_collection(BIG_ROCKS), board)


@pytest.mark.parametrize(
    ("timeframe", "expected"),
    [
        (Timeframe.DAILY, date(2026, 2, 1)),
        (Timeframe.WEEKLY, date(2026, 2, 7)),
        (Timeframe.MONTHLY, date(2026, 2, 28)),
        (Timeframe.QUARTERLY, date(2026, 4, 30)),
        (Timeframe.YEARLY, date(2027, 1, 31)),
    ],
)
def test_due_date_from_timeframe(timeframe: Timeframe, expected: date):
    assert timeframe.due_date_from(START) == expected


@pytest.mark.asyncio
async def test_add_big_rock_creates_linked_task_first(planner: BigRockPlanner, board: TaskBoard, remote):
    result = await planner.add_big_rock(
        "Launch newsletter",
        owner_id="u1",
        timeframe="monthly",
        priority=2,
        quadrant=Quadrant.Q1,
        today=START,
    )

    rock = result.entity
    task = board.get(rock.task_id)
    assert result.synced
    assert rock.due_date == date(2026, 2, 28)
    assert task.title == "Launch newsletter"
    assert task.is_big_rock is True
    assert task.quadrant is Quadrant.Q1
    assert task.due_date == rock.due_date
    assert remote.calls_for("insert") == ["tasks", "big_rocks"]


@pytest.mark.asyncio
async def test_add_big_rock_without_task(planner: BigRockPlanner, board: TaskBoard):
    result = await planner.add_big_rock("Read 12 books", owner_id="u1", create_task=False)

    assert result.entity.task_id is None
    assert board.tasks == []


@pytest.mark.asyncio
async def test_invalid_rock_creates_no_task(planner: BigRockPlanner, board: TaskBoard):
    with pytest.raises(ValidationFailedError):
        await planner.add_big_rock("Bad priority", owner_id="u1", priority=0)

    assert board.tasks == []
    assert planner.rocks == []


@pytest.mark.asyncio
async def test_add_big_rock_reports_task_sync_failure(planner: BigRockPlanner, remote):
    remote.fail.add("insert:tasks")

    result = await planner.add_big_rock("Hire designer", owner_id="u1")

    assert result.synced
    assert [(w.kind, w.table) for w in result.warnings] == [
        (SyncWarningKind.PERSIST_FAILED, "tasks")
    ]


@pytest.mark.asyncio
async def test_update_mirrors_fields_onto_task(planner: BigRockPlanner, board: TaskBoard):
    added = await planner.add_big_rock("Draft plan", owner_id="u1")

    await planner.update_big_rock(
        added.entity.id, title="Final plan", description="v2", quadrant="q1"
    )

    task = board.get(added.entity.task_id)
    assert planner.get(added.entity.id).title == "Final plan"
    assert (task.title, task.description, task.quadrant) == ("Final plan", "v2", Quadrant.Q1)


@pytest.mark.asyncio
async def test_update_quadrant_only_touches_task(planner: BigRockPlanner, board: TaskBoard):
    added = await planner.add_big_rock("Draft plan", owner_id="u1")

    result = await planner.update_big_rock(added.entity.id, quadrant=Quadrant.Q4)

    assert result.entity.id == added.entity.id
    assert board.get(added.entity.task_id).quadrant is Quadrant.Q4


@pytest.mark.asyncio
async def test_update_missing_rock_is_not_found(planner: BigRockPlanner):
    result = await planner.update_big_rock("missing", title="x")

    assert result.state is MutationState.NOT_FOUND


@pytest.mark.asyncio
async def test_toggle_complete_mirrors_task(planner: BigRockPlanner, board: TaskBoard):
    added = await planner.add_big_rock("Run 10k", owner_id="u1")

    await planner.toggle_complete(added.entity.id)

    assert planner.get(added.entity.id).completed is True
    assert board.get(added.entity.task_id).completed is True


@pytest.mark.asyncio
async def test_delete_big_rock_deletes_linked_task(planner: BigRockPlanner, board: TaskBoard, remote):
    added = await planner.add_big_rock("Run 10k", owner_id="u1")

    await planner.delete_big_rock(added.entity.id)

    assert planner.rocks == []
    assert board.tasks == []
    assert remote.tables["tasks"] == {}


@pytest.mark.asyncio
async def test_load_orders_by_priority(planner: BigRockPlanner, remote):
    for record_id, priority in (("b1", 3), ("b2", 1), ("b3", 2)):
        remote.seed(
            "big_rocks",
            {"id": record_id, "user_id": "u1", "title": record_id, "priority": priority},
        )

    await planner.load("u1")

    assert [r.id for r in planner.rocks] == ["b2", "b3", "b1"]
    assert [r.id for r in planner.by_timeframe()[Timeframe.WEEKLY]] == ["b2", "b3", "b1"]
