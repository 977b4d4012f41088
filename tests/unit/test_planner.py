"""Unit tests for the Planner facade and its wiring."""

from datetime import date

import pytest

from covey_planner.config import Settings
from covey_planner.domain.entities import LoadSource, SyncWarningKind
from covey_planner.infrastructure.cache import InMemoryKeyValueStore
from covey_planner.infrastructure.dependencies import build_planner


@pytest.fixture
def planner(remote, notifier):
    settings = Settings(_env_file=None, fetch_retry_attempts=3, fetch_retry_base_delay=0)
    return build_planner(
        settings=settings,
        remote_store=remote,
        key_value_store=InMemoryKeyValueStore(),
        notifier=notifier,
    )


@pytest.mark.asyncio
async def test_load_reports_every_table(planner, remote):
    remote.seed(
        "roles",
        {
            "id": "ro1",
            "user_id": "u1",
            "name": "Parent",
            "created_at": "2026-10-01T08:00:00+00:00",
            "updated_at": "2026-10-01T08:00:00+00:00",
        },
    )

    results = await planner.load("u1")

    assert set(results) == {
        "tasks",
        "big_rocks",
        "rituals",
        "ritual_completions",
        "roles",
        "goals",
        "meetings",
        "mission_items",
        "role_goals",
        "dimension_goals",
        "weekly_plans",
        "daily_plans",
        "weekly_big_rocks",
        "time_blocks",
    }
    assert all(r.source is LoadSource.REMOTE for r in results.values())
    assert [role.name for role in planner.roles.items] == ["Parent"]


@pytest.mark.asyncio
async def test_completion_fetch_is_retried_but_others_are_not(planner, remote, notifier):
    remote.fail.update({"select:ritual_completions", "select:goals"})

    results = await planner.load("u1")

    assert remote.calls_for("select").count("ritual_completions") == 3
    assert remote.calls_for("select").count("goals") == 1
    assert results["goals"].source is LoadSource.EMPTY
    assert {w.table for w in notifier.warnings} == {"ritual_completions", "goals"}
    assert all(w.kind is SyncWarningKind.FETCH_FAILED for w in notifier.warnings)


@pytest.mark.asyncio
async def test_big_rock_tasks_land_on_the_shared_board(planner):
    await planner.load("u1")

    added = await planner.big_rocks.add_big_rock("Launch newsletter", owner_id="u1")

    assert planner.tasks.get(added.entity.task_id) is not None


@pytest.mark.asyncio
async def test_weekly_and_mission_deletes_cascade_to_shared_board(planner):
    await planner.load("u1")
    plan = (await planner.weekly.open_week(date(2026, 10, 15), owner_id="u1")).entity
    rock = (await planner.weekly.add_big_rock(plan.id, "Finish grant proposal")).entity
    task = (await planner.tasks.add_task("Draft mission", owner_id="u1")).entity
    item = (await planner.mission.add({"title": "Be present", "task_id": task.id})).entity

    await planner.weekly.delete_big_rock(rock.id)
    await planner.mission.delete(item.id)

    assert planner.tasks.get(rock.task_id) is None
    assert planner.tasks.get(task.id) is None
