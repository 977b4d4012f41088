"""Per-category logging levels for the planner.

Each category groups a few logger names under one Settings field, so the
chatty ones (SQL statements, outbound HTTP) can be turned down while sync
warnings from the collections stay visible.

Usage:
    from covey_planner.infrastructure.logging.log_config import setup_logging
    setup_logging()   # once, from the FastAPI lifespan or a client script
"""

import logging
import sys
from dataclasses import dataclass

from covey_planner.config import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogCategory:
    """Loggers whose level is taken from one Settings field."""

    setting: str
    loggers: tuple[str, ...]


LOG_CATEGORIES: tuple[LogCategory, ...] = (
    LogCategory("log_level_sql", ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite")),
    LogCategory("log_level_http", ("httpx", "httpcore")),
    LogCategory("log_level_uvicorn", ("uvicorn", "uvicorn.access", "uvicorn.error")),
    LogCategory(
        "log_level_sync",
        (
            "covey_planner.application.services",
            "covey_planner.infrastructure.cache",
            "covey_planner.infrastructure.remote",
        ),
    ),
)


def setup_logging(settings: Settings | None = None) -> dict[str, int]:
    """Apply root and per-category levels; returns the level set per logger name."""
    settings = settings or get_settings()
    applied: dict[str, int] = {}

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level, "log_level"))
    applied["root"] = root.level

    # Uvicorn installs its own handler; scripts and tests get a plain one.
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(settings.log_format))
        root.addHandler(handler)

    for category in LOG_CATEGORIES:
        level = _parse_level(getattr(settings, category.setting, "INFO"), category.setting)
        for name in category.loggers:
            logging.getLogger(name).setLevel(level)
            applied[name] = level

    logger.debug(
        "Logging configured: %s",
        ", ".join(f"{c.setting}={getattr(settings, c.setting)}" for c in LOG_CATEGORIES),
    )
    return applied


def _parse_level(raw: str, setting: str) -> int:
    """Level name → logging constant. Unknown names fall back to INFO."""
    numeric = logging.getLevelName(raw.strip().upper())
    if isinstance(numeric, int):
        return numeric
    logger.warning("Unknown log level %r for %s, using INFO", raw, setting)
    return logging.INFO
