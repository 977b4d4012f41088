"""Application service (use case) for planning big rocks and their linked tasks."""

import logging
from datetime import date
from typing import Any

from covey_planner.application.services.synced_collection import SyncedCollection
from covey_planner.application.services.task_board import TaskBoard
from covey_planner.domain.entities import (
    BigRock,
    LoadResult,
    MutationResult,
    MutationState,
    Quadrant,
    Timeframe,
)

logger = logging.getLogger(__name__)

# Rock fields that are copied onto the linked task when they change.
_MIRRORED_FIELDS = ("title", "description", "due_date")


class BigRockPlanner:
    """Big rocks, each optionally backed by a task on the quadrant board.

    Adding a rock creates its task first so the rock can reference it;
    deleting a rock cascades to the task through the collection link.
    """

    def __init__(self, rocks: SyncedCollection[BigRock], task_board: TaskBoard):
        self._rocks = rocks
        self._board = task_board
        rocks.link("tasks", task_board.collection)

    @property
    def rocks(self) -> list[BigRock]:
        return self._rocks.items

    def get(self, rock_id: str) -> BigRock | None:
        return self._rocks.get(rock_id)

    async def load(self, owner_id: str) -> LoadResult[BigRock]:
        return await self._rocks.load(owner_id)

    async def add_big_rock(
        self,
        title: str,
        *,
        owner_id: str | None = None,
        description: str = "",
        timeframe: Timeframe | str = Timeframe.WEEKLY,
        priority: int = 1,
        create_task: bool = True,
        quadrant: Quadrant | str = Quadrant.Q2,
        today: date | None = None,
    ) -> MutationResult[BigRock]:
        """Add a big rock due at the end of its timeframe.

        The rock is validated before its task is created, so an invalid rock
        never leaves an orphan task behind.
        """
        timeframe = Timeframe(timeframe)
        due = timeframe.due_date_from(today or date.today())
        partial: dict[str, Any] = {
            "title": title,
            "description": description,
            "timeframe": timeframe,
            "priority": priority,
            "due_date": due,
        }
        if owner_id is not None:
            partial["owner_id"] = owner_id
        self._rocks.validate(partial)

        warnings = []
        if create_task:
            task_fields: dict[str, Any] = {
                "description": description,
                "quadrant": quadrant,
                "due_date": due,
                "is_big_rock": True,
            }
            if owner_id is not None:
                task_fields["owner_id"] = owner_id
            task_result = await self._board.add_task(title, **task_fields)
            partial["task_id"] = task_result.entity.id
            warnings.extend(task_result.warnings)

        result = await self._rocks.add(partial)
        result.warnings[:0] = warnings
        return result

    async def update_big_rock(
        self, rock_id: str, *, quadrant: Quadrant | str | None = None, **changes: Any
    ) -> MutationResult[BigRock]:
        """Update a rock and mirror title, description, due date and quadrant to its task."""
        result = await self._rocks.update(rock_id, changes) if changes else self._unchanged(rock_id)
        if result.not_found:
            return result

        rock = result.entity
        task_changes = {name: changes[name] for name in _MIRRORED_FIELDS if name in changes}
        if quadrant is not None:
            task_changes["quadrant"] = quadrant
        if rock.task_id and task_changes:
            task_result = await self._board.update_task(rock.task_id, **task_changes)
            if task_result.not_found:
                logger.debug("Linked task %s of big rock %s not loaded", rock.task_id, rock_id)
            result.warnings.extend(task_result.warnings)
        return result

    async def toggle_complete(self, rock_id: str) -> MutationResult[BigRock]:
        """Flip a rock's completion and keep its task in step."""
        result = await self._rocks.toggle(rock_id, "completed")
        if result.not_found:
            return result

        rock = result.entity
        if rock.task_id:
            task_result = await self._board.update_task(rock.task_id, completed=rock.completed)
            result.warnings.extend(task_result.warnings)
        return result

    async def delete_big_rock(self, rock_id: str) -> MutationResult[BigRock]:
        return await self._rocks.delete(rock_id)

    def by_timeframe(self) -> dict[Timeframe, list[BigRock]]:
        """Group rocks by timeframe, highest priority first."""
        grouped: dict[Timeframe, list[BigRock]] = {t: [] for t in Timeframe}
        for rock in self._rocks:
            grouped[rock.timeframe].append(rock)
        for rocks in grouped.values():
            rocks.sort(key=lambda r: r.priority)
        return grouped

    def _unchanged(self, rock_id: str) -> MutationResult[BigRock]:
        rock = self._rocks.get(rock_id)
        if rock is None:
            return MutationResult(entity=None, state=MutationState.NOT_FOUND)
        return MutationResult(entity=rock, state=MutationState.PERSISTED)
