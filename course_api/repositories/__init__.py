"""
Persistence adapters.

Services depend on the RecordStore contract rather than touching the JSON
documents or the database directly. build_store picks the backend from settings.
"""

from __future__ import annotations

from course_api.core.config import Settings
from course_api.repositories.base import DuplicateEnrollment, RecordStore, StorageError
from course_api.repositories.json_storage import JsonRecordStore
from course_api.repositories.sql_repository import SQLRecordStore

__all__ = [
    "DuplicateEnrollment",
    "JsonRecordStore",
    "RecordStore",
    "SQLRecordStore",
    "StorageError",
    "build_store",
]


def build_store(settings: Settings) -> RecordStore:
    backend = settings.storage_backend
    if backend == "json":
        return JsonRecordStore(settings.data_dir)
    if backend in ("sql", "sqlite"):
        return SQLRecordStore(settings.database_url)
    raise ValueError(f"Unknown STORAGE_BACKEND {backend!r} (expected 'sql' or 'json')")
