from .sqlalchemy_remote_store import SQLAlchemyRemoteStore

__all__ = [
    "SQLAlchemyRemoteStore",
]
