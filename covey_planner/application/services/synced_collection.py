"""Optimistic, cache-backed collection of one owner's records for one table.

Every mutation follows the same path:

    apply to in-memory state → mirror into LocalCache → persist to RemoteStore

The first two steps happen before the first ``await``, so a caller reading
``items`` right after starting a mutation already sees it. A failed remote
call never rolls local state back; it produces exactly one PERSIST_FAILED
warning and the mutation ends there. The next successful ``load`` replaces
local state with remote truth.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterator, Mapping
from dataclasses import fields, is_dataclass
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from covey_planner.application.interfaces import OWNER_COLUMN, Notifier, RemoteStore
from covey_planner.application.schemas.records import RecordRow
from covey_planner.application.schemas.tables import RecordDescriptor
from covey_planner.application.services.local_cache import LocalCache
from covey_planner.application.services.retry import NO_RETRY, RetryPolicy
from covey_planner.domain.entities import (
    LoadResult,
    LoadSource,
    MutationResult,
    MutationState,
    SyncWarning,
    SyncWarningKind,
)
from covey_planner.domain.exceptions import RemoteStoreError, ValidationFailedError
from covey_planner.domain.ids import new_id

logger = logging.getLogger(__name__)

T = TypeVar("T")

ChangeListener = Callable[["SyncedCollection[Any]"], None]

_IMMUTABLE_FIELDS = frozenset({"id", "owner_id", OWNER_COLUMN, "created_at"})

CACHED_DATA_MESSAGE = "Using cached data. Some information may be outdated."
LOAD_FAILED_MESSAGE = "Failed to load {label}s. Please check your connection and try again."
NOT_SYNCED_MESSAGE = (
    "{label} {verb} locally but not synced to the server. "
    "Changes may be lost when you refresh."
)


def _validation_errors(exc: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in err['loc']) or 'row'}: {err['msg']}"
        for err in exc.errors()
    ]


class SyncedCollection(Generic[T]):
    """In-memory collection of entities for one owner, kept in sync optimistically.

    Dependencies are injected so tests can substitute fakes:

    - ``remote_store``: source of truth, may fail or hang
    - ``local_cache``: offline snapshot used when a load fails
    - ``notifier``: optional toast channel for sync warnings
    - ``linked_collections``: collections (by table) that receive cascade
      deletes for the descriptor's links; links without one are deleted
      directly in the remote store
    """

    def __init__(
        self,
        descriptor: RecordDescriptor,
        remote_store: RemoteStore,
        local_cache: LocalCache,
        *,
        notifier: Notifier | None = None,
        timeout: float | None = 10.0,
        retry_policy: RetryPolicy = NO_RETRY,
        linked_collections: Mapping[str, "SyncedCollection[Any]"] | None = None,
    ):
        self._descriptor = descriptor
        self._remote = remote_store
        self._cache = local_cache
        self._notifier = notifier
        self._timeout = timeout
        self._retry = retry_policy
        self._linked = dict(linked_collections or {})
        self._items: list[T] = []
        self._owner_id: str | None = None
        self._listeners: list[ChangeListener] = []

    # ── Read access ─────────────────────────────────────────────────

    @property
    def table(self) -> str:
        return self._descriptor.table

    @property
    def descriptor(self) -> RecordDescriptor:
        return self._descriptor

    @property
    def owner_id(self) -> str | None:
        return self._owner_id

    @property
    def items(self) -> list[T]:
        """Snapshot of the current collection, in display order."""
        return list(self._items)

    def get(self, entity_id: str) -> T | None:
        for item in self._items:
            if item.id == entity_id:  # type: ignore[attr-defined]
                return item
        return None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __contains__(self, entity_id: object) -> bool:
        return any(item.id == entity_id for item in self._items)  # type: ignore[attr-defined]

    def link(self, table: str, collection: "SyncedCollection[Any]") -> None:
        """Route cascade deletes for *table* through *collection*."""
        self._linked[table] = collection

    def on_change(self, listener: ChangeListener) -> None:
        """Register a callback run after every local state change."""
        self._listeners.append(listener)

    # ── Load ────────────────────────────────────────────────────────

    async def load(self, owner_id: str) -> LoadResult[T]:
        """Fetch the owner's records, falling back to the local cache.

        Never raises. On success the cache is overwritten with the fetched
        rows; on failure the cached snapshot (or an empty collection) is used
        and the result carries a FETCH_FAILED warning.
        """
        self._owner_id = owner_id
        order = self._descriptor.order

        async def fetch() -> list[dict[str, Any]]:
            rows = await self.call(
                self._remote.select(self.table, {OWNER_COLUMN: owner_id}, order)
            )
            if not isinstance(rows, list):
                raise RemoteStoreError(
                    "select", self.table, f"expected a list of rows, got {type(rows).__name__}"
                )
            return rows

        try:
            rows = await self._retry.run(fetch, description=f"Fetch {self.table} for {owner_id}")
        except Exception as exc:
            logger.warning("Fetching %s for owner %s failed: %s", self.table, owner_id, exc)
            cached = self._parse_rows(self._cache.load(self._scope()), owner_id)
            if cached:
                source = LoadSource.CACHE
                message = CACHED_DATA_MESSAGE
            else:
                source = LoadSource.EMPTY
                message = LOAD_FAILED_MESSAGE.format(label=self._descriptor.label.lower())
            self._items = self._sorted(cached)
            warning = self._warning(SyncWarningKind.FETCH_FAILED, message)
            await self._notify(warning)
            self._changed()
            return LoadResult(items=list(self._items), source=source, warning=warning)

        entities = self._parse_rows(rows, owner_id)
        self._items = self._sorted(entities)
        self._save_cache()
        self._changed()
        logger.debug("Loaded %d %s for owner %s", len(self._items), self.table, owner_id)
        return LoadResult(items=list(self._items), source=LoadSource.REMOTE)

    # ── Mutations ───────────────────────────────────────────────────

    async def add(self, partial: Mapping[str, Any] | Any) -> MutationResult[T]:
        """Create an entity, show it immediately, then persist it.

        Raises ValidationFailedError (before touching any state) if a
        required field is missing. An id already present in the collection
        replaces that entity instead of duplicating it, so re-adding an
        unsynced entity retries its insert under the same id.
        """
        record = self._build(partial)
        entity = record.to_entity()

        self._owner_id = entity.owner_id
        index = self._index_of(entity.id)
        if index is None:
            self._items.insert(0, entity)
        else:
            self._items[index] = entity
        result: MutationResult[T] = MutationResult(entity=entity)
        self._save_cache()
        self._changed()

        await self._persist(
            result,
            verb="added",
            call=lambda: self._remote.insert(self.table, record.to_row()),
        )
        return result

    def validate(self, partial: Mapping[str, Any] | Any) -> T:
        """Build the entity *partial* would add, without changing any state.

        Raises ValidationFailedError exactly as ``add`` would.
        """
        return self._build(partial).to_entity()

    async def update(self, entity_id: str, patch: Mapping[str, Any]) -> MutationResult[T]:
        """Merge *patch* into an entity immediately, then persist it.

        Unknown ids are a no-op (NOT_FOUND result). Patching identity fields
        or unknown fields raises ValidationFailedError before any change.
        """
        index = self._index_of(entity_id)
        if index is None:
            logger.debug("Update of missing %s %s ignored", self.table, entity_id)
            return MutationResult(entity=None, state=MutationState.NOT_FOUND)

        current = self._items[index]
        schema = self._descriptor.row_schema
        errors = [
            f"{key}: cannot be changed" if key in _IMMUTABLE_FIELDS else f"{key}: unknown field"
            for key in patch
            if key in _IMMUTABLE_FIELDS or key not in schema.model_fields
        ]
        if errors:
            raise ValidationFailedError(self._descriptor.label, errors)

        row = schema.from_entity(current).model_dump()
        row.update(patch)
        row["updated_at"] = datetime.now(timezone.utc)
        record = self._validate(row)
        entity = record.to_entity()
        for name in getattr(type(entity), "derived_fields", ()):
            setattr(entity, name, getattr(current, name))

        self._items[index] = entity
        result: MutationResult[T] = MutationResult(entity=entity)
        self._save_cache()
        self._changed()

        full_row = record.to_row()
        remote_patch = {key: full_row[key] for key in (*patch, "updated_at")}

        async def persist() -> None:
            updated = await self._remote.update(
                self.table, entity_id, remote_patch, owner_id=entity.owner_id
            )
            if not updated:
                # Never reached the store (e.g. its insert failed): write it whole.
                await self._remote.insert(self.table, full_row)

        await self._persist(result, verb="updated", call=persist)
        return result

    async def delete(self, entity_id: str) -> MutationResult[T]:
        """Remove an entity immediately, then delete it remotely.

        Linked entities are deleted best effort afterwards; a failed cascade
        only adds a warning and never restores the primary entity.
        """
        index = self._index_of(entity_id)
        if index is None:
            logger.debug("Delete of missing %s %s ignored", self.table, entity_id)
            return MutationResult(entity=None, state=MutationState.NOT_FOUND)

        entity = self._items.pop(index)
        result: MutationResult[T] = MutationResult(entity=entity)
        self._save_cache()
        self._changed()

        await self._persist(
            result,
            verb="deleted",
            call=lambda: self._remote.delete(self.table, entity_id, owner_id=entity.owner_id),
        )
        for link in self._descriptor.links:
            linked_id = getattr(entity, link.field, None)
            if linked_id:
                result.warnings.extend(
                    await self._cascade_delete(link.table, linked_id, entity.owner_id)
                )
        return result

    async def toggle(self, entity_id: str, field: str) -> MutationResult[T]:
        """Flip a boolean field (e.g. ``completed``) through ``update``."""
        entity = self.get(entity_id)
        if entity is None:
            return MutationResult(entity=None, state=MutationState.NOT_FOUND)
        current = getattr(entity, field, None)
        if not isinstance(current, bool):
            raise ValidationFailedError(self._descriptor.label, [f"{field}: not a boolean field"])
        return await self.update(entity_id, {field: not current})

    # ── Internals ───────────────────────────────────────────────────

    async def call(self, awaitable: Awaitable[Any]) -> Any:
        """Await a remote call under this collection's advisory wall-clock timeout."""
        if self._timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout=self._timeout)

    async def _persist(
        self,
        result: MutationResult[T],
        *,
        verb: str,
        call: Callable[[], Awaitable[Any]],
    ) -> None:
        entity_id = getattr(result.entity, "id", None)
        result.mark_persisting()
        try:
            await self.call(call())
        except Exception as exc:
            logger.warning(
                "%s %s %s locally but not synced: %s",
                self._descriptor.label,
                entity_id,
                verb,
                exc,
            )
            warning = self._warning(
                SyncWarningKind.PERSIST_FAILED,
                NOT_SYNCED_MESSAGE.format(label=self._descriptor.label, verb=verb),
                entity_id=entity_id,
            )
            result.mark_failed(warning)
            await self._notify(warning)
        else:
            result.mark_persisted()

    async def _cascade_delete(self, table: str, linked_id: str, owner_id: str) -> list[SyncWarning]:
        collection = self._linked.get(table)
        if collection is not None and linked_id in collection:
            outcome = await collection.delete(linked_id)
            return outcome.warnings
        try:
            await self.call(self._remote.delete(table, linked_id, owner_id=owner_id))
        except Exception as exc:
            logger.warning("Cascade delete of %s %s failed: %s", table, linked_id, exc)
            warning = SyncWarning(
                kind=SyncWarningKind.PERSIST_FAILED,
                message=f"Linked record in {table} could not be deleted.",
                table=table,
                entity_id=linked_id,
                owner_id=owner_id,
            )
            await self._notify(warning)
            return [warning]
        return []

    async def _notify(self, warning: SyncWarning) -> None:
        if self._notifier is None:
            return
        try:
            await self._notifier.notify(warning)
        except Exception as exc:
            logger.warning("Notifier failed to deliver %s warning: %s", warning.kind.value, exc)

    def _warning(
        self, kind: SyncWarningKind, message: str, entity_id: str | None = None
    ) -> SyncWarning:
        return SyncWarning(
            kind=kind,
            message=message,
            table=self.table,
            entity_id=entity_id,
            owner_id=self._owner_id,
        )

    def _build(self, partial: Mapping[str, Any] | Any) -> RecordRow:
        data = self._as_mapping(partial)
        owner_id = data.pop("owner_id", None) or data.pop(OWNER_COLUMN, None) or self._owner_id
        if not owner_id:
            raise ValidationFailedError(self._descriptor.label, ["owner_id: Field required"])
        if self._owner_id is not None and owner_id != self._owner_id:
            raise ValidationFailedError(
                self._descriptor.label,
                [f"owner_id: collection belongs to '{self._owner_id}', not '{owner_id}'"],
            )

        now = datetime.now(timezone.utc)
        row = {"created_at": now, "updated_at": now, **data}
        row["id"] = data.get("id") or new_id()
        row[OWNER_COLUMN] = owner_id
        return self._validate(row)

    def _validate(self, row: Mapping[str, Any]) -> RecordRow:
        try:
            return self._descriptor.row_schema.model_validate(row)
        except ValidationError as exc:
            raise ValidationFailedError(self._descriptor.label, _validation_errors(exc)) from exc

    def _parse_rows(self, rows: list[dict[str, Any]], owner_id: str) -> list[T]:
        """Parse store/cache rows, dropping malformed rows and foreign owners."""
        entities: list[T] = []
        for row in rows:
            try:
                record = self._descriptor.row_schema.model_validate(row)
            except ValidationError as exc:
                logger.warning(
                    "Skipping malformed %s row %s: %s",
                    self.table,
                    row.get("id") if isinstance(row, dict) else None,
                    "; ".join(_validation_errors(exc)),
                )
                continue
            if record.user_id != owner_id:
                logger.warning(
                    "Skipping %s row %s owned by another user", self.table, record.id
                )
                continue
            entities.append(record.to_entity())
        return entities

    def _sorted(self, entities: list[T]) -> list[T]:
        order = self._descriptor.order
        return sorted(entities, key=lambda e: getattr(e, order.column), reverse=order.descending)

    def _index_of(self, entity_id: str) -> int | None:
        for index, item in enumerate(self._items):
            if item.id == entity_id:  # type: ignore[attr-defined]
                return index
        return None

    def _scope(self) -> str:
        return LocalCache.scope(self.table, self._owner_id or "")

    def _save_cache(self) -> None:
        schema = self._descriptor.row_schema
        self._cache.save(self._scope(), [schema.from_entity(e).to_row() for e in self._items])

    def _changed(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Change listener failed for %s", self.table)

    @staticmethod
    def _as_mapping(partial: Mapping[str, Any] | Any) -> dict[str, Any]:
        if isinstance(partial, Mapping):
            return dict(partial)
        if is_dataclass(partial) and not isinstance(partial, type):
            return {f.name: getattr(partial, f.name) for f in fields(partial)}
        raise TypeError(f"Expected a mapping or entity, got {type(partial).__name__}")
