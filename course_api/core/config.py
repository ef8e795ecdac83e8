"""
Configuration helpers for the course API.

Routers, services and stores receive a Settings object instead of reading
os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    host: str
    port: int
    storage_backend: str
    data_dir: str
    database_url: str
    cors_origins: tuple[str, ...]
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _list(value: str | None) -> tuple[str, ...]:
        if not value:
            return ()
        return tuple(item.strip().rstrip("/") for item in value.split(",") if item.strip())

    app_env = (os.getenv("APP_ENV") or "dev").lower()
    # serverless hosts only allow writes under /tmp
    default_dir = "/tmp" if app_env == "prod" else "./data"
    data_dir = os.getenv("DATA_DIR") or default_dir
    database_url = os.getenv("DATABASE_URL") or f"sqlite:///{os.path.join(data_dir, 'courses.db')}"

    return Settings(
        app_env=app_env,
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int(os.getenv("PORT", "5000"), 5000),
        storage_backend=(os.getenv("STORAGE_BACKEND") or "sql").strip().lower(),
        data_dir=data_dir,
        database_url=database_url,
        cors_origins=_list(os.getenv("CORS_ORIGINS")),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
