from __future__ import annotations

import pytest
from sqlalchemy import event
from typer.testing import CliRunner

from sqlmigrator import cli
from sqlmigrator.cli import app
from sqlmigrator.config import get_settings
from sqlmigrator.db import create_database_engine
from sqlmigrator.migrator import Migrator

runner = CliRunner()


@pytest.fixture()
def workspace(tmp_path, monkeypatch):
    migrations = tmp_path / "migrations"
    migrations.mkdir()
    (migrations / "001_create_users.sql").write_text("-- Users\nCREATE TABLE users (id INTEGER);\n")
    monkeypatch.setenv("DB_DSN", f"sqlite:///{tmp_path / 'cli.sqlite'}")
    monkeypatch.setenv("MIGRATIONS_STRICT", "true")
    monkeypatch.delenv("MIGRATIONS_BACKEND", raising=False)
    monkeypatch.delenv("MIGRATIONS_SCHEMA", raising=False)
    monkeypatch.delenv("MIGRATIONS_TABLE", raising=False)
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


def _applied(tmp_path):
    engine = create_database_engine(f"sqlite:///{tmp_path / 'cli.sqlite'}")
    return Migrator(engine).applied()


def test_run_applies_directory(workspace):
    result = runner.invoke(app, ["run", str(workspace / "migrations")])

    assert result.exit_code == 0, result.output
    assert "Done" in result.output
    assert list(_applied(workspace)) == ["001_create_users"]


def test_run_reports_failure(workspace):
    (workspace / "migrations" / "002_broken.sql").write_text("INSERT INTO nowhere VALUES (1);\n")

    result = runner.invoke(app, ["run", str(workspace / "migrations")])

    assert result.exit_code == 1
    assert "MIGRATION_FAILED" in result.output
    assert _applied(workspace) == {}


def test_run_detects_drift_and_repairs(workspace):
    migration = workspace / "migrations" / "001_create_users.sql"
    assert runner.invoke(app, ["run", str(workspace / "migrations")]).exit_code == 0

    migration.write_text("-- Users\ncreate table users (id integer);\n")
    drifted = runner.invoke(app, ["run", str(workspace / "migrations")])
    tolerated = runner.invoke(app, ["run", str(workspace / "migrations"), "--unsafe"])
    repaired = runner.invoke(
        app, ["run", str(workspace / "migrations"), "--repair", "001_create_users"]
    )
    clean = runner.invoke(app, ["run", str(workspace / "migrations")])

    assert drifted.exit_code == 1
    assert tolerated.exit_code == 0, tolerated.output
    assert repaired.exit_code == 0, repaired.output
    assert clean.exit_code == 0, clean.output


def test_run_missing_directory(workspace):
    result = runner.invoke(app, ["run", str(workspace / "absent")])

    assert result.exit_code == 1
    assert "LOAD_FAILED" in result.output


def test_history_lists_records(workspace):
    empty = runner.invoke(app, ["history"])
    assert empty.exit_code == 0
    assert "No migrations have been applied" in empty.output

    runner.invoke(app, ["run", str(workspace / "migrations")])
    listed = runner.invoke(app, ["history"])

    assert listed.exit_code == 0
    assert "No migrations have been applied" not in listed.output


def test_unknown_backend_option(workspace):
    result = runner.invoke(app, ["history", "--backend", "nope"])

    assert result.exit_code == 1
    assert "BACKEND_ERROR" in result.output


def test_dialect_command():
    result = runner.invoke(app, ["dialect", "psycopg2"])

    assert result.exit_code == 0
    assert result.output.strip() == "postgres"


def test_commands_dispose_their_engine(workspace, monkeypatch):
    disposed = []

    def tracking_engine(dsn):
        engine = create_database_engine(dsn)
        event.listen(engine, "engine_disposed", lambda eng: disposed.append(eng))
        return engine

    monkeypatch.setattr(cli, "create_database_engine", tracking_engine)

    assert runner.invoke(app, ["run", str(workspace / "migrations")]).exit_code == 0
    assert runner.invoke(app, ["history"]).exit_code == 0
    assert runner.invoke(app, ["run", str(workspace / "absent")]).exit_code == 1

    assert len(disposed) == 3
