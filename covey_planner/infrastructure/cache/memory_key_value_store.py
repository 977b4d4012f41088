"""Process-local KeyValueStore, used when no durable cache directory is configured."""

from covey_planner.application.interfaces import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store; contents are lost when the process exits."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def __len__(self) -> int:
        return len(self._values)
