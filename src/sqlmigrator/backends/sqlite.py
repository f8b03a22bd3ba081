"""SQLite tracking table adapter. The schema name is ignored."""

from __future__ import annotations

from sqlalchemy.engine import Engine

from .base import DialectSql, SqlBackend

SQLITE = DialectSql(
    name="sqlite",
    exists_query="SELECT count(*) FROM sqlite_master WHERE type = 'table' AND name = :table",
    qualify_schema=False,
    create_statements=(
        """CREATE TABLE {table} (
    -- list the schema changes
    id      INTEGER   PRIMARY KEY,
    name    TEXT      NOT NULL UNIQUE,
    hash    TEXT      NOT NULL,
    date    TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL,
    comment TEXT      NOT NULL
)""",
    ),
)


def sqlite_backend(engine: Engine, table: str, schema: str | None = None) -> SqlBackend:
    return SqlBackend(engine, table, schema, SQLITE)


__all__ = ["SQLITE", "sqlite_backend"]
