from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the course_api package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from course_api.core import config as core_config  # noqa: E402
from course_api.core.config import Settings  # noqa: E402
from course_api.repositories.json_storage import JsonRecordStore  # noqa: E402
from course_api.repositories.sql_repository import SQLRecordStore  # noqa: E402


def make_settings(tmp_path: Path, **overrides) -> Settings:
    values = dict(
        app_env="test",
        host="127.0.0.1",
        port=5000,
        storage_backend="json",
        data_dir=str(tmp_path),
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        cors_origins=(),
        log_level="INFO",
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    core_config.get_settings.cache_clear()
    yield
    core_config.get_settings.cache_clear()


@pytest.fixture(params=["json", "sql"])
def store(request, tmp_path):
    """A fresh store for each backend, torn down after the test."""
    if request.param == "json":
        instance = JsonRecordStore(tmp_path / "data")
    else:
        instance = SQLRecordStore(f"sqlite:///{tmp_path / 'store.db'}")
    instance.initialize()
    yield instance
    instance.close()
