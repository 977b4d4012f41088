"""Shared wiring for the integration tests: the app over an in-memory database."""

from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from covey_planner.infrastructure.database import (
    Base,
    build_engine,
    build_session_factory,
    get_db_session,
)
from covey_planner.main import app

BASE_URL = "http://test"


@asynccontextmanager
async def _in_memory_api() -> AsyncIterator[AsyncClient]:
    """Serve the app with ``get_db_session`` pointed at a fresh SQLite database."""
    engine = build_engine("sqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = build_session_factory(engine)

    async def override_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_session
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url=BASE_URL) as client:
            yield client
    finally:
        app.dependency_overrides.pop(get_db_session, None)
        await engine.dispose()


@pytest.fixture
def api_client() -> Callable[[], AbstractAsyncContextManager[AsyncClient]]:
    """Factory: ``async with api_client() as client`` gives a client on a fresh database."""
    return _in_memory_api
