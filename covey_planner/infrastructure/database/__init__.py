from .base import Base
from .session import (
    engine,
    async_session_factory,
    build_engine,
    build_session_factory,
    get_db_session,
)
from .models import RECORD_MODELS

__all__ = [
    "Base",
    "engine",
    "async_session_factory",
    "build_engine",
    "build_session_factory",
    "get_db_session",
    "RECORD_MODELS",
]
