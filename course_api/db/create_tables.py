"""Create the SQL schema for the configured DATABASE_URL: python -m course_api.db.create_tables"""
from __future__ import annotations

import logging

from course_api.core.config import get_settings
from course_api.core.logging import configure_logging
from course_api.repositories.base import StorageError
from course_api.repositories.sql_repository import SQLRecordStore

logger = logging.getLogger(__name__)


def create_all(database_url: str | None = None) -> None:
    store = SQLRecordStore(database_url or get_settings().database_url)
    try:
        store.initialize()
    finally:
        store.close()


if __name__ == "__main__":
    configure_logging(get_settings().log_level)
    try:
        create_all()
    except StorageError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
    logger.info("Database tables created successfully.")
