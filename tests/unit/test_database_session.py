"""Unit tests for database URL and engine wiring."""

import pytest
from sqlalchemy.pool import StaticPool

from covey_planner.infrastructure.database.session import build_engine, to_async_url


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("sqlite:///./covey_planner.db", "sqlite+aiosqlite:///./covey_planner.db"),
        ("postgresql://app@db/covey", "postgresql+asyncpg://app@db/covey"),
        ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
    ],
)
def test_to_async_url(url: str, expected: str):
    assert to_async_url(url) == expected


def test_in_memory_sqlite_shares_one_connection():
    engine = build_engine("sqlite:///:memory:")

    assert isinstance(engine.pool, StaticPool)
    assert engine.url.drivername == "sqlite+aiosqlite"
