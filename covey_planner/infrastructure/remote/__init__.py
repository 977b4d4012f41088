from .http_remote_store import HttpRemoteStore

__all__ = ["HttpRemoteStore"]
