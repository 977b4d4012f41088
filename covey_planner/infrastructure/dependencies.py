"""Dependency injection: wires infrastructure to the application layer.

FastAPI ``Depends`` providers for the record API, plus ``build_planner``
which assembles the synced collections a client session works with.
"""

from collections.abc import AsyncGenerator
from functools import lru_cache

import httpx
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from covey_planner.config import Settings, get_settings
from covey_planner.application.interfaces import KeyValueStore, Notifier, RemoteStore
from covey_planner.application.schemas.tables import (
    BIG_ROCKS,
    DAILY_PLANS,
    DIMENSION_GOALS,
    GOALS,
    MEETINGS,
    MISSION_ITEMS,
    RITUAL_COMPLETIONS,
    RITUALS,
    ROLE_GOALS,
    ROLES,
    TASKS,
    TIME_BLOCKS,
    WEEKLY_BIG_ROCKS,
    WEEKLY_PLANS,
    RecordDescriptor,
)
from covey_planner.application.services import (
    BigRockPlanner,
    LocalCache,
    Planner,
    RecordService,
    RetryPolicy,
    RitualTracker,
    SSEManager,
    SyncedCollection,
    TaskBoard,
    WeeklyPlanner,
)
from covey_planner.infrastructure.cache import FileKeyValueStore, InMemoryKeyValueStore
from covey_planner.infrastructure.database.session import get_db_session
from covey_planner.infrastructure.database.repositories import SQLAlchemyRemoteStore
from covey_planner.infrastructure.remote import HttpRemoteStore


@lru_cache
def get_sse_manager() -> SSEManager:
    """Process-wide SSE broadcaster for sync warnings."""
    return SSEManager()


async def get_record_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[RecordService, None]:
    """Provides a RecordService with the SQLAlchemy store wired up."""
    yield RecordService(SQLAlchemyRemoteStore(session))


def build_planner(
    *,
    settings: Settings | None = None,
    remote_store: RemoteStore | None = None,
    key_value_store: KeyValueStore | None = None,
    notifier: Notifier | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> Planner:
    """Assemble a Planner whose collections share one store, cache and notifier.

    Defaults come from settings: the HTTP record API as the remote store and
    a file-backed snapshot cache under ``cache_dir`` (in memory when empty).
    """
    settings = settings or get_settings()
    if remote_store is None:
        remote_store = HttpRemoteStore(
            settings.remote_store_url,
            timeout=settings.remote_timeout_seconds,
            http_client=http_client,
        )
    if key_value_store is None:
        key_value_store = (
            FileKeyValueStore(settings.cache_dir)
            if settings.cache_dir
            else InMemoryKeyValueStore()
        )
    cache = LocalCache(key_value_store)
    notifier = notifier if notifier is not None else get_sse_manager()
    fetch_retry = RetryPolicy(
        max_attempts=settings.fetch_retry_attempts,
        base_delay=settings.fetch_retry_base_delay,
    )

    def collection(
        descriptor: RecordDescriptor, retry_policy: RetryPolicy | None = None
    ) -> SyncedCollection:
        kwargs = {"retry_policy": retry_policy} if retry_policy is not None else {}
        return SyncedCollection(
            descriptor,
            remote_store,
            cache,
            notifier=notifier,
            timeout=settings.remote_timeout_seconds,
            **kwargs,
        )

    task_board = TaskBoard(collection(TASKS))
    mission = collection(MISSION_ITEMS)
    mission.link("tasks", task_board.collection)
    return Planner(
        tasks=task_board,
        rituals=RitualTracker(
            collection(RITUALS),
            collection(RITUAL_COMPLETIONS, fetch_retry),
            remote_store,
        ),
        big_rocks=BigRockPlanner(collection(BIG_ROCKS), task_board),
        roles=collection(ROLES),
        goals=collection(GOALS),
        meetings=collection(MEETINGS),
        weekly=WeeklyPlanner(
            collection(WEEKLY_PLANS),
            collection(DAILY_PLANS),
            collection(WEEKLY_BIG_ROCKS),
            collection(TIME_BLOCKS),
            task_board,
        ),
        mission=mission,
        role_goals=collection(ROLE_GOALS),
        dimension_goals=collection(DIMENSION_GOALS),
    )
