"""Dialect adapters translating tracking-table operations into SQL."""

from .base import Backend, BackendFactory, DialectSql, SqlBackend  # noqa: F401
from .mysql import MYSQL, mysql_backend  # noqa: F401
from .postgres import POSTGRES, postgres_backend  # noqa: F401
from .sqlite import SQLITE, sqlite_backend  # noqa: F401

BUILTIN_BACKENDS: dict[str, BackendFactory] = {
    "postgres": postgres_backend,
    "mysql": mysql_backend,
    "sqlite": sqlite_backend,
}

__all__ = [
    "BUILTIN_BACKENDS",
    "Backend",
    "BackendFactory",
    "DialectSql",
    "MYSQL",
    "POSTGRES",
    "SQLITE",
    "SqlBackend",
    "mysql_backend",
    "postgres_backend",
    "sqlite_backend",
]
