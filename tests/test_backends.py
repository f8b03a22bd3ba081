from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from sqlmigrator.backends import POSTGRES, SqlBackend, sqlite_backend
from sqlmigrator.db import create_database_engine


@pytest.fixture()
def engine(tmp_path):
    return create_database_engine(f"sqlite:///{tmp_path / 'backend.sqlite'}")


def test_sqlite_backend_creates_and_detects_table(engine):
    backend = sqlite_backend(engine, "schema_log")
    assert backend.table_exists() is False

    ddl = backend.create_tracking_table()

    assert "CREATE TABLE schema_log" in ddl
    assert backend.table_exists() is True
    assert backend.fetch_applied() == {}


def test_sqlite_backend_inserts_and_repairs(engine):
    backend = sqlite_backend(engine, "migrations")
    backend.create_tracking_table()

    with engine.begin() as conn:
        backend.insert_applied(conn, "create_users", "a" * 32, "Add users")
        backend.insert_applied(conn, "add_email", "b" * 32, "")

    assert backend.fetch_applied() == {"create_users": "a" * 32, "add_email": "b" * 32}

    with engine.begin() as conn:
        backend.repair_checksums(conn, {"create_users": "c" * 32, "add_email": ""})

    assert backend.fetch_applied() == {"create_users": "c" * 32, "add_email": "b" * 32}

    records = backend.fetch_records()
    assert [record.name for record in records] == ["create_users", "add_email"]
    assert records[0].id == 1
    assert records[0].comment == "Add users"
    assert records[0].applied_at is not None


def test_insert_is_rolled_back_with_transaction(engine):
    backend = sqlite_backend(engine, "migrations")
    backend.create_tracking_table()

    with pytest.raises(RuntimeError):
        with engine.begin() as conn:
            backend.insert_applied(conn, "doomed", "d" * 32, "")
            raise RuntimeError("abort")

    assert backend.fetch_applied() == {}


def test_duplicate_record_violates_unique_name(engine):
    backend = sqlite_backend(engine, "migrations")
    backend.create_tracking_table()
    with engine.begin() as conn:
        backend.insert_applied(conn, "once", "e" * 32, "")

    with pytest.raises(IntegrityError):
        with engine.begin() as conn:
            backend.insert_applied(conn, "once", "f" * 32, "")


def test_schema_qualification_follows_dialect(engine):
    assert sqlite_backend(engine, "migrations", "main").qualified_table == "migrations"
    qualified = SqlBackend(engine, "migrations", "app", POSTGRES).qualified_table
    assert qualified == "app.migrations"
