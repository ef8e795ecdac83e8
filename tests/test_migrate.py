from __future__ import annotations

import importlib.util
from pathlib import Path

from sqlalchemy import create_engine, inspect

from course_api.core.config import get_settings
from course_api.db import create_tables
from course_api.repositories.json_storage import JsonRecordStore
from course_api.repositories.sql_repository import SQLRecordStore

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "migrate_json_to_sql.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("migrate_json_to_sql", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_migrate_copies_records_once(tmp_path):
    source = JsonRecordStore(tmp_path / "json")
    enrollment = source.insert_enrollment("a@x.com", "Ann", "Intro")
    source.insert_enrollment("b@x.com", "Bob", "Intro")
    submission = source.insert_contact_submission("Ann", "a@x.com", "Hi", "Hello")

    target = SQLRecordStore(f"sqlite:///{tmp_path / 'target.db'}")
    migrate = _load_script().migrate

    assert migrate(source, target) == (2, 1)
    assert migrate(source, target) == (0, 0)

    assert target.find_enrollment("Intro", "a@x.com") == enrollment
    assert target.list_contact_submissions() == [submission]
    assert target.enrollment_stats().total_enrollments == 2
    target.close()


def test_migrate_main_reads_arguments(tmp_path):
    JsonRecordStore(tmp_path).insert_enrollment("a@x.com", "Ann", "Intro")
    db_url = f"sqlite:///{tmp_path / 'cli.db'}"

    _load_script().main(["--data-dir", str(tmp_path), "--database-url", db_url])

    target = SQLRecordStore(db_url)
    assert len(target.list_enrollments()) == 1
    target.close()


def test_create_tables_uses_configured_database(tmp_path, monkeypatch):
    db_file = tmp_path / "schema" / "schema.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    get_settings.cache_clear()

    create_tables.create_all()
    create_tables.create_all()

    engine = create_engine(f"sqlite:///{db_file}")
    assert {"enrollments", "contact_submissions"} <= set(inspect(engine).get_table_names())
    engine.dispose()
