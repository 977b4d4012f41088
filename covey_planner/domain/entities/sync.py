"""Domain values describing the outcome of sync operations."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class SyncWarningKind(str, Enum):
    """Non-fatal failure categories surfaced to the view layer."""

    FETCH_FAILED = "fetch_failed"
    PERSIST_FAILED = "persist_failed"


class MutationState(str, Enum):
    """Lifecycle of a single optimistic mutation."""

    APPLIED_LOCALLY = "applied_locally"
    PERSISTING = "persisting"
    PERSISTED = "persisted"
    PERSIST_FAILED = "persist_failed"
    NOT_FOUND = "not_found"


class LoadSource(str, Enum):
    """Where the collection contents of a load came from."""

    REMOTE = "remote"
    CACHE = "cache"
    EMPTY = "empty"


@dataclass
class SyncWarning:
    """A toast-style warning: transient, never blocking."""

    kind: SyncWarningKind
    message: str
    table: str
    entity_id: str | None = None
    owner_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, str | None]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "table": self.table,
            "entity_id": self.entity_id,
            "owner_id": self.owner_id,
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class LoadResult(Generic[T]):
    """Tagged result of a collection load. Never raised, always returned."""

    items: list[T]
    source: LoadSource
    warning: SyncWarning | None = None

    @property
    def fetch_failed(self) -> bool:
        return self.warning is not None and self.warning.kind is SyncWarningKind.FETCH_FAILED

    @property
    def error(self) -> str | None:
        """Set only when the store failed and no cached data was available."""
        if self.source is LoadSource.EMPTY and self.warning is not None:
            return self.warning.message
        return None


@dataclass
class MutationResult(Generic[T]):
    """Outcome of an add / update / delete / toggle.

    ``entity`` is the locally applied entity (the removed one for deletes),
    or None when the target id was not found.
    """

    entity: T | None
    state: MutationState = MutationState.APPLIED_LOCALLY
    warnings: list[SyncWarning] = field(default_factory=list)

    def mark_persisting(self) -> None:
        self.state = MutationState.PERSISTING

    def mark_persisted(self) -> None:
        self.state = MutationState.PERSISTED

    def mark_failed(self, warning: SyncWarning) -> None:
        self.state = MutationState.PERSIST_FAILED
        self.warnings.append(warning)

    @property
    def synced(self) -> bool:
        return self.state is MutationState.PERSISTED

    @property
    def not_found(self) -> bool:
        return self.state is MutationState.NOT_FOUND
