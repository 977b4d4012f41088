from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Covey Planner API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    database_url: str = "sqlite+aiosqlite:///./covey_planner.db"
    cors_origins: list[str] = ["http://localhost:5173"]

    # Remote record store used by client-side synced collections
    remote_store_url: str = "http://localhost:8000/api/v1"
    remote_timeout_seconds: float = 10.0

    # Fetch retries (bounded exponential backoff, loads only)
    fetch_retry_attempts: int = 3
    fetch_retry_base_delay: float = 1.0

    # Offline snapshot directory for the file-backed local cache
    cache_dir: str = "data/cache"

    # Idle seconds before the warning stream sends a keepalive comment
    sse_heartbeat_seconds: float = 15.0

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine, SQL queries
    log_level_http: str = "WARNING"          # httpx / httpcore, outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_sync: str = "INFO"             # synced collections and trackers
    log_format: str = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance, reads .env once."""
    return Settings()
