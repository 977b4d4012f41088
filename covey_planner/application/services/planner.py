"""Application facade bundling every synced planner area for one owner."""

import logging
from dataclasses import dataclass
from typing import Any

from covey_planner.application.services.big_rock_planner import BigRockPlanner
from covey_planner.application.services.ritual_tracker import RitualTracker
from covey_planner.application.services.synced_collection import SyncedCollection
from covey_planner.application.services.task_board import TaskBoard
from covey_planner.application.services.weekly_planner import WeeklyPlanner
from covey_planner.domain.entities import (
    DimensionGoal,
    Goal,
    LoadResult,
    Meeting,
    MissionItem,
    Role,
    RoleGoal,
)

logger = logging.getLogger(__name__)


@dataclass
class Planner:
    """Every planning area of one user, each backed by its synced collections."""

    tasks: TaskBoard
    rituals: RitualTracker
    big_rocks: BigRockPlanner
    roles: SyncedCollection[Role]
    goals: SyncedCollection[Goal]
    meetings: SyncedCollection[Meeting]
    weekly: WeeklyPlanner
    mission: SyncedCollection[MissionItem]
    role_goals: SyncedCollection[RoleGoal]
    dimension_goals: SyncedCollection[DimensionGoal]

    async def load(self, owner_id: str) -> dict[str, LoadResult[Any]]:
        """Load every area for *owner_id*; never raises.

        Returns the load result per table so callers can show which areas
        are running on cached data.
        """
        results: dict[str, LoadResult[Any]] = {}
        results["tasks"] = await self.tasks.load(owner_id)
        results["big_rocks"] = await self.big_rocks.load(owner_id)
        rituals, completions = await self.rituals.load(owner_id)
        results["rituals"] = rituals
        results["ritual_completions"] = completions
        for collection in (
            self.roles,
            self.goals,
            self.meetings,
            self.mission,
            self.role_goals,
            self.dimension_goals,
        ):
            results[collection.table] = await collection.load(owner_id)
        results.update(await self.weekly.load(owner_id))

        degraded = sorted(table for table, result in results.items() if result.fetch_failed)
        if degraded:
            logger.info("Planner for %s loaded with stale data: %s", owner_id, ", ".join(degraded))
        return results
