"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from covey_planner.config import get_settings
from covey_planner.infrastructure.database import Base, engine
from covey_planner.infrastructure.dependencies import get_sse_manager
from covey_planner.infrastructure.logging.log_config import setup_logging
from covey_planner.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: create tables, then close SSE clients on shutdown."""
    setup_logging()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Record tables ready: %s", ", ".join(sorted(Base.metadata.tables)))

    yield

    # Shutdown
    sse = get_sse_manager()
    await sse.shutdown()
    await engine.dispose()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "covey_planner.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
