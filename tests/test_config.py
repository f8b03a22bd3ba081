from __future__ import annotations

from pathlib import Path

from sqlmigrator.config import get_settings


def test_settings_defaults(monkeypatch):
    for key in (
        "DB_DSN",
        "MIGRATIONS_TABLE",
        "MIGRATIONS_SCHEMA",
        "MIGRATIONS_DIR",
        "MIGRATIONS_STRICT",
        "MIGRATIONS_BACKEND",
    ):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.db_dsn == "sqlite:///sqlmigrator.db"
    assert settings.tracking_table == "migrations"
    assert settings.schema is None
    assert settings.migrations_dir == Path("migrations")
    assert settings.strict is True
    assert settings.backend is None
    get_settings.cache_clear()


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("DB_DSN", "postgresql+psycopg://app@localhost/app")
    monkeypatch.setenv("MIGRATIONS_TABLE", "schema_changes")
    monkeypatch.setenv("MIGRATIONS_SCHEMA", "ops")
    monkeypatch.setenv("MIGRATIONS_DIR", "db/migrations")
    monkeypatch.setenv("MIGRATIONS_STRICT", "false")
    monkeypatch.setenv("MIGRATIONS_BACKEND", "postgres")
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.db_dsn == "postgresql+psycopg://app@localhost/app"
    assert settings.tracking_table == "schema_changes"
    assert settings.schema == "ops"
    assert settings.migrations_dir == Path("db/migrations")
    assert settings.strict is False
    assert settings.backend == "postgres"
    get_settings.cache_clear()
