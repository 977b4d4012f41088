from .file_key_value_store import FileKeyValueStore
from .memory_key_value_store import InMemoryKeyValueStore

__all__ = [
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
]
