"""Application service (use case) for the quadrant task board."""

from datetime import date
from typing import Any

from covey_planner.application.services.synced_collection import SyncedCollection
from covey_planner.domain.entities import LoadResult, MutationResult, MutationState, Quadrant, Task
from covey_planner.domain.exceptions import ValidationFailedError


class TaskBoard:
    """Task operations on top of a SyncedCollection of tasks."""

    def __init__(self, collection: SyncedCollection[Task]):
        self._tasks = collection

    @property
    def collection(self) -> SyncedCollection[Task]:
        return self._tasks

    @property
    def tasks(self) -> list[Task]:
        return self._tasks.items

    def get(self, task_id: str) -> Task | None:
        return self._tasks.get(task_id)

    async def load(self, owner_id: str) -> LoadResult[Task]:
        return await self._tasks.load(owner_id)

    async def add_task(self, title: str, **fields: Any) -> MutationResult[Task]:
        return await self._tasks.add({"title": title, **fields})

    async def update_task(self, task_id: str, **changes: Any) -> MutationResult[Task]:
        return await self._tasks.update(task_id, changes)

    async def delete_task(self, task_id: str) -> MutationResult[Task]:
        return await self._tasks.delete(task_id)

    async def toggle_completion(self, task_id: str) -> MutationResult[Task]:
        return await self._tasks.toggle(task_id, "completed")

    async def move_task(self, task_id: str, quadrant: Quadrant | str) -> MutationResult[Task]:
        """Drop a task into another quadrant."""
        return await self._tasks.update(task_id, {"quadrant": quadrant})

    async def add_time_spent(self, task_id: str, seconds: int) -> MutationResult[Task]:
        """Accumulate tracked time (e.g. a finished pomodoro) on a task."""
        if seconds < 0:
            raise ValidationFailedError("Task", ["time_spent: cannot add negative time"])
        task = self._tasks.get(task_id)
        if task is None:
            return MutationResult(entity=None, state=MutationState.NOT_FOUND)
        return await self._tasks.update(task_id, {"time_spent": task.time_spent + seconds})

    def by_quadrant(self, *, include_completed: bool = True) -> dict[Quadrant, list[Task]]:
        """Group tasks into the four quadrants, preserving collection order."""
        grouped: dict[Quadrant, list[Task]] = {q: [] for q in Quadrant}
        for task in self._tasks:
            if include_completed or not task.completed:
                grouped[task.quadrant].append(task)
        return grouped

    def completed_on(self, day: date) -> list[Task]:
        """Tasks marked complete on *day* (by last update), most recent first."""
        done = [
            t for t in self._tasks
            if t.completed and t.updated_at.astimezone().date() == day
        ]
        return sorted(done, key=lambda t: t.updated_at, reverse=True)
