"""Abstract interface (port) for a durable string-keyed store."""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Port for a local durable key-value store (browser storage equivalent).

    Values are strings; callers serialize to JSON themselves. Implementations
    may raise on I/O or quota problems; ``LocalCache`` absorbs those.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...
