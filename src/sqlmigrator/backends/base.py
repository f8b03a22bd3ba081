"""Backend protocol and the generic SQL adapter the built-in dialects share."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Mapping, Protocol

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

from ..models import AppliedRecord


class Backend(Protocol):
    """Runtime interface a dialect adapter must implement."""

    def table_exists(self) -> bool: ...

    def create_tracking_table(self) -> str: ...

    def fetch_applied(self, conn: Connection | None = None) -> dict[str, str]: ...

    def fetch_records(self, conn: Connection | None = None) -> list[AppliedRecord]: ...

    def insert_applied(self, conn: Connection, name: str, checksum: str, comment: str) -> None: ...

    def repair_checksums(self, conn: Connection, checksums: Mapping[str, str]) -> None: ...


BackendFactory = Callable[[Engine, str, "str | None"], Backend]


@dataclass(frozen=True, slots=True)
class DialectSql:
    """SQL templates for one engine.

    ``{table}`` is replaced by the quoted, optionally schema-qualified
    tracking table name and ``{schema}`` by either the ``:schema`` bind
    parameter or ``default_schema`` when no schema was configured.
    """

    name: str
    exists_query: str
    create_statements: tuple[str, ...]
    default_schema: str | None = None
    qualify_schema: bool = True
    insert_query: str = "INSERT INTO {table} (name, hash, comment) VALUES (:name, :hash, :comment)"
    select_query: str = "SELECT name, hash FROM {table}"
    records_query: str = "SELECT id, name, hash, date, comment FROM {table} ORDER BY id"
    update_query: str = "UPDATE {table} SET hash = :hash WHERE name = :name"


class SqlBackend:
    """Execute a :class:`DialectSql` against one engine and tracking table."""

    def __init__(self, engine: Engine, table: str, schema: str | None, dialect: DialectSql) -> None:
        self.engine = engine
        self.table = table
        self.schema = schema
        self.dialect = dialect

    def __repr__(self) -> str:
        return f"SqlBackend(dialect={self.dialect.name!r}, table={self.table!r}, schema={self.schema!r})"

    # ------------------------------------------------------------------
    @property
    def qualified_table(self) -> str:
        preparer = self.engine.dialect.identifier_preparer
        quoted = preparer.quote(self.table)
        if self.schema and self.dialect.qualify_schema:
            return f"{preparer.quote_schema(self.schema)}.{quoted}"
        return quoted

    def _render(self, template: str) -> str:
        schema = ":schema" if self.schema else (self.dialect.default_schema or ":schema")
        return template.format(table=self.qualified_table, schema=schema)

    @contextmanager
    def _connection(self, conn: Connection | None) -> Iterator[Connection]:
        if conn is not None:
            yield conn
            return
        with self.engine.connect() as owned:
            yield owned

    # Backend protocol -------------------------------------------------
    def table_exists(self) -> bool:
        query = self._render(self.dialect.exists_query)
        params: dict[str, object] = {"table": self.table}
        if ":schema" in query:
            params["schema"] = self.schema
        with self.engine.connect() as conn:
            return bool(conn.execute(text(query), params).scalar())

    def create_tracking_table(self) -> str:
        statements = [self._render(statement) for statement in self.dialect.create_statements]
        with self.engine.begin() as conn:
            for statement in statements:
                conn.execute(text(statement))
        return ";\n\n".join(statements) + ";"

    def fetch_applied(self, conn: Connection | None = None) -> dict[str, str]:
        with self._connection(conn) as active:
            rows = active.execute(text(self._render(self.dialect.select_query))).all()
        return {str(row[0]): str(row[1]) for row in rows}

    def fetch_records(self, conn: Connection | None = None) -> list[AppliedRecord]:
        with self._connection(conn) as active:
            rows = active.execute(text(self._render(self.dialect.records_query))).all()
        return [
            AppliedRecord(
                id=int(row[0]),
                name=str(row[1]),
                checksum=str(row[2]),
                applied_at=row[3],
                comment=str(row[4] or ""),
            )
            for row in rows
        ]

    def insert_applied(self, conn: Connection, name: str, checksum: str, comment: str) -> None:
        conn.execute(
            text(self._render(self.dialect.insert_query)),
            {"name": name, "hash": checksum, "comment": comment},
        )

    def repair_checksums(self, conn: Connection, checksums: Mapping[str, str]) -> None:
        statement = text(self._render(self.dialect.update_query))
        for name, checksum in checksums.items():
            if not checksum:
                continue
            conn.execute(statement, {"hash": checksum, "name": name})


__all__ = ["Backend", "BackendFactory", "DialectSql", "SqlBackend"]
