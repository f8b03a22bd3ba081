"""Process-wide lookup from driver names to dialect keys and backend factories."""

from __future__ import annotations

import logging
import threading

from sqlalchemy.engine import Engine

from .backends import BUILTIN_BACKENDS, BackendFactory
from .errors import BackendAlreadyRegisteredError, UnknownBackendError

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"

DEFAULT_DRIVERS: dict[str, tuple[str, ...]] = {
    "postgres": (
        "postgres",
        "postgresql",
        "psycopg",
        "psycopg2",
        "psycopg2cffi",
        "pg8000",
        "asyncpg",
        "cockroachdb",
        "pgx",
    ),
    "mysql": (
        "mysql",
        "mysqldb",
        "pymysql",
        "mysqlconnector",
        "mariadb",
        "mariadbconnector",
        "aiomysql",
        "asyncmy",
    ),
    "sqlite": ("sqlite", "sqlite3", "pysqlite", "aiosqlite", "pysqlcipher"),
    "oracle": ("oracle", "cx_oracle", "oracledb"),
    "sqlserver": ("sqlserver", "mssql", "pyodbc", "pymssql"),
}

_DRIVER_TABLE: dict[str, str] = {
    driver: dialect for dialect, drivers in DEFAULT_DRIVERS.items() for driver in drivers
}


def resolve_dialect(driver: str) -> str:
    """Map a driver identifier to its dialect key, or :data:`UNKNOWN`."""

    return _DRIVER_TABLE.get(driver.lower(), UNKNOWN)


def dialect_for_engine(engine: Engine) -> str:
    """Resolve the dialect of an engine from its DBAPI driver, then its dialect name."""

    key = resolve_dialect(engine.driver)
    if key == UNKNOWN:
        key = resolve_dialect(engine.dialect.name)
    return key


class BackendRegistry:
    """Thread-safe mapping of dialect keys to backend factories.

    Keys cannot be overwritten or removed once registered.
    """

    def __init__(self, backends: dict[str, BackendFactory] | None = None) -> None:
        self._lock = threading.Lock()
        self._backends: dict[str, BackendFactory] = dict(backends or {})

    def register(self, key: str, factory: BackendFactory) -> None:
        with self._lock:
            if key in self._backends:
                raise BackendAlreadyRegisteredError(key)
            self._backends[key] = factory
        logger.debug("Registered migration backend %s", key)

    def select(self, key: str) -> BackendFactory:
        with self._lock:
            factory = self._backends.get(key)
        if factory is None:
            raise UnknownBackendError(key)
        return factory

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._backends)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._backends


default_registry = BackendRegistry(BUILTIN_BACKENDS)


def register_backend(key: str, factory: BackendFactory) -> None:
    """Register a custom backend factory on the process-wide registry."""

    default_registry.register(key, factory)


__all__ = [
    "BackendRegistry",
    "DEFAULT_DRIVERS",
    "UNKNOWN",
    "default_registry",
    "dialect_for_engine",
    "register_backend",
    "resolve_dialect",
]
