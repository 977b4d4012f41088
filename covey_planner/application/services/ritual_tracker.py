"""Application service (use case) for rituals, daily completions and streaks."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from covey_planner.application.interfaces import OWNER_COLUMN, RemoteStore
from covey_planner.application.services.synced_collection import SyncedCollection
from covey_planner.domain.entities import (
    LoadResult,
    MutationResult,
    MutationState,
    Ritual,
    RitualCompletion,
    normalize_completion_date,
)
from covey_planner.domain.exceptions import ValidationFailedError
from covey_planner.domain.ids import completion_id
from covey_planner.domain.streaks import (
    MonthlyStats,
    current_streak,
    date_key,
    longest_streak,
    monthly_completion_rate,
)

logger = logging.getLogger(__name__)


@dataclass
class CompletedItem:
    """One entry of the "recently completed" log shown next to the tracker."""

    completion_id: str
    ritual_id: str
    ritual_title: str
    completed_at: datetime


class RitualTracker:
    """Tracks rituals and their per-day completions.

    Owns two synced collections (rituals and ritual completions) and an
    index ``ritual_id → {yyyy-MM-dd → completion}`` rebuilt whenever either
    changes. Rebuilding the index also refreshes every ritual's derived
    ``streak`` / ``longest_streak``.
    """

    def __init__(
        self,
        rituals: SyncedCollection[Ritual],
        completions: SyncedCollection[RitualCompletion],
        remote_store: RemoteStore,
        *,
        clock: Callable[[], date] = date.today,
    ):
        self._rituals = rituals
        self._completions = completions
        self._remote = remote_store
        self._clock = clock
        self._index: dict[str, dict[str, RitualCompletion]] = {}
        rituals.on_change(self._reindex)
        completions.on_change(self._reindex)

    @property
    def rituals(self) -> list[Ritual]:
        return self._rituals.items

    def get(self, ritual_id: str) -> Ritual | None:
        return self._rituals.get(ritual_id)

    # ── Loading ─────────────────────────────────────────────────────

    async def load(self, owner_id: str) -> tuple[LoadResult[Ritual], LoadResult[RitualCompletion]]:
        """Load rituals, then their completions (the latter with retries)."""
        rituals = await self._rituals.load(owner_id)
        completions = await self._completions.load(owner_id)
        return rituals, completions

    # ── Rituals ─────────────────────────────────────────────────────

    async def add_ritual(self, title: str, **fields: Any) -> MutationResult[Ritual]:
        if "days_of_week" in fields and not fields["days_of_week"]:
            raise ValidationFailedError("Ritual", ["days_of_week: select at least one day"])
        return await self._rituals.add({"title": title, **fields})

    async def update_ritual(self, ritual_id: str, **changes: Any) -> MutationResult[Ritual]:
        if "days_of_week" in changes and not changes["days_of_week"]:
            raise ValidationFailedError("Ritual", ["days_of_week: select at least one day"])
        return await self._rituals.update(ritual_id, changes)

    async def delete_ritual(self, ritual_id: str) -> MutationResult[Ritual]:
        """Delete a ritual and, best effort, every completion recorded for it."""
        dependents = [c for c in self._completions if c.ritual_id == ritual_id]
        result = await self._rituals.delete(ritual_id)
        if result.not_found:
            return result
        for completion in dependents:
            outcome = await self._completions.delete(completion.id)
            result.warnings.extend(outcome.warnings)
        return result

    # ── Completions ─────────────────────────────────────────────────

    def is_completed(self, ritual_id: str, day: date | datetime) -> bool:
        return date_key(day) in self._index.get(ritual_id, {})

    def completions_for(self, ritual_id: str) -> dict[str, RitualCompletion]:
        return dict(self._index.get(ritual_id, {}))

    async def toggle_completion(
        self, ritual_id: str, day: date | datetime | None = None
    ) -> MutationResult[RitualCompletion]:
        """Mark *day* (default today) done, or undo it if already done.

        Before inserting, an existing record for the same (ritual, day) is
        looked up locally and then in the remote store; a remote hit is
        adopted under its own id rather than inserted again.
        """
        ritual = self._rituals.get(ritual_id)
        if ritual is None:
            logger.debug("Completion toggle for unknown ritual %s ignored", ritual_id)
            return MutationResult(entity=None, state=MutationState.NOT_FOUND)

        day = day or self._clock()
        key = date_key(day)
        existing = self._index.get(ritual_id, {}).get(key)
        if existing is not None:
            return await self._completions.delete(existing.id)

        completed_at = normalize_completion_date(day)
        record_id = await self._find_remote_completion(ritual, completed_at)
        return await self._completions.add(
            {
                "id": record_id or completion_id(ritual_id, completed_at),
                "ritual_id": ritual_id,
                "owner_id": ritual.owner_id,
                "date": completed_at,
            }
        )

    async def _find_remote_completion(self, ritual: Ritual, completed_at: datetime) -> str | None:
        try:
            rows = await self._completions.call(
                self._remote.select(
                    self._completions.table,
                    {
                        OWNER_COLUMN: ritual.owner_id,
                        "ritual_id": ritual.id,
                        "date": completed_at.isoformat(),
                    },
                )
            )
        except Exception as exc:
            logger.info("Could not check for an existing completion of %s: %s", ritual.id, exc)
            return None
        for row in rows if isinstance(rows, list) else []:
            if isinstance(row, dict) and row.get("id"):
                return str(row["id"])
        return None

    # ── Derived stats ───────────────────────────────────────────────

    def get_streak(self, ritual_id: str) -> int:
        return current_streak(self._index.get(ritual_id, {}), today=self._clock())

    def get_longest_streak(self, ritual_id: str) -> int:
        return longest_streak(self._index.get(ritual_id, {}))

    def get_completion_rate(self, ritual_id: str) -> MonthlyStats:
        ritual = self._rituals.get(ritual_id)
        days = ritual.days_of_week if ritual is not None else None
        return monthly_completion_rate(
            self._index.get(ritual_id, {}), days_of_week=days, today=self._clock()
        )

    def completed_items(self, limit: int | None = None) -> list[CompletedItem]:
        """Recent completions across all rituals, newest first."""
        titles = {r.id: r.title for r in self._rituals}
        items = [
            CompletedItem(
                completion_id=c.id,
                ritual_id=c.ritual_id,
                ritual_title=titles[c.ritual_id],
                completed_at=c.date,
            )
            for by_day in self._index.values()
            for c in by_day.values()
        ]
        items.sort(key=lambda item: item.completed_at, reverse=True)
        return items[:limit] if limit is not None else items

    def _reindex(self, _collection: SyncedCollection[Any]) -> None:
        known = {r.id for r in self._rituals}
        index: dict[str, dict[str, RitualCompletion]] = {ritual_id: {} for ritual_id in known}
        orphans = 0
        for completion in self._completions:
            if completion.ritual_id not in known:
                orphans += 1
                continue
            index[completion.ritual_id][date_key(completion.date)] = completion
        if orphans:
            logger.debug("Ignoring %d completions for unknown rituals", orphans)
        self._index = index

        today = self._clock()
        for ritual in self._rituals:
            by_day = index.get(ritual.id, {})
            ritual.streak = current_streak(by_day, today=today)
            ritual.longest_streak = longest_streak(by_day)
