"""Application service (use case) for the week-at-a-glance planner.

A week is a WeeklyPlan with one DailyPlan per day, the big rocks committed
to for that week and the time blocks scheduled on each day. Weeks run
Monday to Sunday.
"""

import logging
from datetime import date
from typing import Any

from covey_planner.application.services.synced_collection import SyncedCollection
from covey_planner.application.services.task_board import TaskBoard
from covey_planner.domain.entities import (
    DailyPlan,
    LoadResult,
    MutationResult,
    MutationState,
    Quadrant,
    TimeBlock,
    WeeklyBigRock,
    WeeklyPlan,
    week_bounds,
)

logger = logging.getLogger(__name__)

# Rock fields that are copied onto the linked task when they change.
_MIRRORED_FIELDS = ("title", "description", "quadrant", "role_id")


class WeeklyPlanner:
    """Weekly and daily plans, weekly big rocks and time blocks of one user.

    Weekly big rocks are backed by tasks on the quadrant board the same way
    BigRockPlanner's rocks are: the task is created first and deleting the
    rock cascades to it. Time blocks only reference a task.
    """

    def __init__(
        self,
        plans: SyncedCollection[WeeklyPlan],
        days: SyncedCollection[DailyPlan],
        rocks: SyncedCollection[WeeklyBigRock],
        blocks: SyncedCollection[TimeBlock],
        task_board: TaskBoard,
    ):
        self._plans = plans
        self._days = days
        self._rocks = rocks
        self._blocks = blocks
        self._board = task_board
        rocks.link("tasks", task_board.collection)

    async def load(self, owner_id: str) -> dict[str, LoadResult[Any]]:
        """Load all four weekly tables for *owner_id*; never raises."""
        return {
            collection.table: await collection.load(owner_id)
            for collection in (self._plans, self._days, self._rocks, self._blocks)
        }

    # ── Weeks and days ──────────────────────────────────────────────

    def plan_for(self, day: date) -> WeeklyPlan | None:
        """The plan of the week containing *day*, if one is loaded."""
        start, _ = week_bounds(day)
        return next((p for p in self._plans if p.week_start_date == start), None)

    def daily_plan_for(self, day: date) -> DailyPlan | None:
        return next((d for d in self._days if d.date == day), None)

    def days_of(self, plan_id: str) -> list[DailyPlan]:
        return sorted(
            (d for d in self._days if d.weekly_plan_id == plan_id), key=lambda d: d.date
        )

    async def open_week(
        self, day: date, *, owner_id: str | None = None
    ) -> MutationResult[WeeklyPlan]:
        """Return the plan of the week containing *day*, creating what is missing.

        A new week gets an empty plan; every day of the week without a daily
        plan gets an empty one. Warnings from failed inserts are collected
        on the returned result.
        """
        plan = self.plan_for(day)
        if plan is None:
            start, end = week_bounds(day)
            partial: dict[str, Any] = {"week_start_date": start, "week_end_date": end}
            if owner_id is not None:
                partial["owner_id"] = owner_id
            result = await self._plans.add(partial)
            plan = result.entity
            logger.debug("Started weekly plan %s for week of %s", plan.id, start)
        else:
            result = MutationResult(entity=plan, state=MutationState.PERSISTED)

        for weekday in plan.days:
            if self.daily_plan_for(weekday) is not None:
                continue
            day_result = await self._days.add(
                {"weekly_plan_id": plan.id, "date": weekday, "owner_id": plan.owner_id}
            )
            result.warnings.extend(day_result.warnings)
        return result

    async def update_week(self, plan_id: str, **changes: Any) -> MutationResult[WeeklyPlan]:
        """Change a week's theme or reflection."""
        return await self._plans.update(plan_id, changes)

    async def update_day(self, daily_plan_id: str, **changes: Any) -> MutationResult[DailyPlan]:
        """Change a day's morning review or evening reflection."""
        return await self._days.update(daily_plan_id, changes)

    # ── Weekly big rocks ────────────────────────────────────────────

    def big_rocks_for(self, plan_id: str) -> list[WeeklyBigRock]:
        """Rocks of one week, highest priority first."""
        return sorted(
            (r for r in self._rocks if r.weekly_plan_id == plan_id), key=lambda r: r.priority
        )

    async def add_big_rock(
        self,
        plan_id: str,
        title: str,
        *,
        description: str = "",
        role_id: str | None = None,
        quadrant: Quadrant | str = Quadrant.Q2,
        priority: int = 1,
        create_task: bool = True,
    ) -> MutationResult[WeeklyBigRock]:
        """Commit a big rock to a loaded week, backing it with a task by default.

        The rock is validated before its task is created, so an invalid rock
        never leaves an orphan task behind.
        """
        plan = self._plans.get(plan_id)
        if plan is None:
            logger.debug("Big rock for missing weekly plan %s ignored", plan_id)
            return MutationResult(entity=None, state=MutationState.NOT_FOUND)

        partial: dict[str, Any] = {
            "weekly_plan_id": plan_id,
            "owner_id": plan.owner_id,
            "title": title,
            "description": description,
            "role_id": role_id,
            "quadrant": quadrant,
            "priority": priority,
        }
        self._rocks.validate(partial)

        warnings = []
        if create_task:
            task_result = await self._board.add_task(
                title,
                owner_id=plan.owner_id,
                description=description,
                quadrant=quadrant,
                role_id=role_id,
                is_big_rock=True,
            )
            partial["task_id"] = task_result.entity.id
            warnings.extend(task_result.warnings)

        result = await self._rocks.add(partial)
        result.warnings[:0] = warnings
        return result

    async def update_big_rock(self, rock_id: str, **changes: Any) -> MutationResult[WeeklyBigRock]:
        """Update a rock and mirror title, description, quadrant and role to its task."""
        result = await self._rocks.update(rock_id, changes)
        if result.not_found:
            return result

        rock = result.entity
        task_changes = {name: changes[name] for name in _MIRRORED_FIELDS if name in changes}
        if rock.task_id and task_changes:
            task_result = await self._board.update_task(rock.task_id, **task_changes)
            if task_result.not_found:
                logger.debug("Linked task %s of weekly rock %s not loaded", rock.task_id, rock_id)
            result.warnings.extend(task_result.warnings)
        return result

    async def toggle_big_rock(self, rock_id: str) -> MutationResult[WeeklyBigRock]:
        """Flip a rock's completion and keep its task in step."""
        result = await self._rocks.toggle(rock_id, "completed")
        if result.not_found:
            return result

        rock = result.entity
        if rock.task_id:
            task_result = await self._board.update_task(rock.task_id, completed=rock.completed)
            result.warnings.extend(task_result.warnings)
        return result

    async def delete_big_rock(self, rock_id: str) -> MutationResult[WeeklyBigRock]:
        return await self._rocks.delete(rock_id)

    # ── Time blocks ─────────────────────────────────────────────────

    def time_blocks_for(self, daily_plan_id: str) -> list[TimeBlock]:
        """Blocks of one day in start-time order."""
        return sorted(
            (b for b in self._blocks if b.daily_plan_id == daily_plan_id),
            key=lambda b: b.start_time,
        )

    async def add_time_block(
        self, daily_plan_id: str, title: str, start_time: str, end_time: str, **fields: Any
    ) -> MutationResult[TimeBlock]:
        day = self._days.get(daily_plan_id)
        if day is None:
            logger.debug("Time block for missing daily plan %s ignored", daily_plan_id)
            return MutationResult(entity=None, state=MutationState.NOT_FOUND)
        return await self._blocks.add(
            {
                "daily_plan_id": daily_plan_id,
                "owner_id": day.owner_id,
                "title": title,
                "start_time": start_time,
                "end_time": end_time,
                **fields,
            }
        )

    async def update_time_block(self, block_id: str, **changes: Any) -> MutationResult[TimeBlock]:
        return await self._blocks.update(block_id, changes)

    async def toggle_time_block(self, block_id: str) -> MutationResult[TimeBlock]:
        return await self._blocks.toggle(block_id, "completed")

    async def delete_time_block(self, block_id: str) -> MutationResult[TimeBlock]:
        return await self._blocks.delete(block_id)
