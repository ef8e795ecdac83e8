from __future__ import annotations

import pytest

from course_api.core.config import get_settings
from course_api.repositories import JsonRecordStore, SQLRecordStore, build_store


def test_defaults(monkeypatch):
    for name in ("APP_ENV", "PORT", "STORAGE_BACKEND", "DATA_DIR", "DATABASE_URL", "CORS_ORIGINS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.app_env == "dev"
    assert settings.port == 5000
    assert settings.storage_backend == "sql"
    assert settings.data_dir == "./data"
    assert settings.database_url.startswith("sqlite:///")
    assert settings.database_url.endswith("courses.db")
    assert settings.cors_origins == ()


def test_prod_writes_under_tmp(monkeypatch):
    monkeypatch.setenv("APP_ENV", "PROD")
    monkeypatch.delenv("DATA_DIR", raising=False)
    assert get_settings().data_dir == "/tmp"


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("PORT", "not-a-number")
    monkeypatch.setenv("STORAGE_BACKEND", "JSON")
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example/, https://b.example ,")

    settings = get_settings()

    assert settings.port == 5000
    assert settings.cors_origins == ("https://a.example", "https://b.example")
    assert isinstance(build_store(settings), JsonRecordStore)


def test_build_store_selects_sql(monkeypatch, tmp_path):
    monkeypatch.setenv("STORAGE_BACKEND", "sql")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'x.db'}")
    store = build_store(get_settings())
    assert isinstance(store, SQLRecordStore)
    store.close()


def test_build_store_rejects_unknown_backend(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "mongo")
    with pytest.raises(ValueError):
        build_store(get_settings())
