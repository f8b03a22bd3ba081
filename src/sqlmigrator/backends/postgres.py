"""PostgreSQL (and wire-compatible engines) tracking table adapter."""

from __future__ import annotations

from sqlalchemy.engine import Engine

from .base import DialectSql, SqlBackend

POSTGRES = DialectSql(
    name="postgres",
    exists_query=(
        "SELECT EXISTS ("
        " SELECT 1 FROM information_schema.tables"
        " WHERE table_schema = {schema} AND table_name = :table"
        ")"
    ),
    default_schema="current_schema()",
    create_statements=(
        """CREATE TABLE {table} (
    id      SERIAL       PRIMARY KEY,
    name    VARCHAR(64)  NOT NULL UNIQUE,
    hash    VARCHAR(32)  NOT NULL,
    date    TIMESTAMP    DEFAULT NOW() NOT NULL,
    comment VARCHAR(512) NOT NULL
)""",
        "COMMENT ON TABLE {table} IS 'list the schema changes'",
    ),
)


def postgres_backend(engine: Engine, table: str, schema: str | None = None) -> SqlBackend:
    return SqlBackend(engine, table, schema, POSTGRES)


__all__ = ["POSTGRES", "postgres_backend"]
