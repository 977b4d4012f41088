from .remote_store import RemoteStore, OrderBy, OWNER_COLUMN
from .key_value_store import KeyValueStore
from .notifier import Notifier

__all__ = [
    "RemoteStore",
    "OrderBy",
    "OWNER_COLUMN",
    "KeyValueStore",
    "Notifier",
]
