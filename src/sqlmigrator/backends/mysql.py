"""MySQL / MariaDB tracking table adapter.

In MySQL the schema is the database name; when none is configured the
connection's current database is used.
"""

from __future__ import annotations

from sqlalchemy.engine import Engine

from .base import DialectSql, SqlBackend

MYSQL = DialectSql(
    name="mysql",
    exists_query=(
        "SELECT EXISTS ("
        " SELECT 1 FROM information_schema.tables"
        " WHERE table_schema = {schema} AND table_name = :table"
        ")"
    ),
    default_schema="DATABASE()",
    create_statements=(
        """CREATE TABLE {table} (
    id      INT          NOT NULL AUTO_INCREMENT PRIMARY KEY,
    name    VARCHAR(64)  NOT NULL UNIQUE KEY,
    hash    VARCHAR(32)  NOT NULL,
    date    TIMESTAMP    DEFAULT CURRENT_TIMESTAMP NOT NULL,
    comment VARCHAR(512) NOT NULL
)
COMMENT 'list the schema changes'""",
    ),
)


def mysql_backend(engine: Engine, table: str, schema: str | None = None) -> SqlBackend:
    return SqlBackend(engine, table, schema, MYSQL)


__all__ = ["MYSQL", "mysql_backend"]
