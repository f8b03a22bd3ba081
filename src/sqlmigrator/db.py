"""Engine construction helpers."""

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url


def _normalise_dsn(dsn: str) -> str:
    if "://" in dsn:
        return dsn
    return f"sqlite:///{dsn}"


def create_database_engine(dsn: str, **kwargs) -> Engine:
    """Create an engine whose transactions also cover DDL.

    A bare filesystem path is treated as a SQLite database. The stdlib
    SQLite driver commits DDL implicitly, so for pysqlite URLs the driver's
    own transaction handling is disabled and ``BEGIN`` is emitted by
    SQLAlchemy instead.
    """

    url = make_url(_normalise_dsn(dsn))
    engine = create_engine(url, future=True, **kwargs)
    if engine.dialect.name == "sqlite" and engine.driver == "pysqlite":
        _enable_sqlite_transactions(engine)
    return engine


def _enable_sqlite_transactions(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


__all__ = ["create_database_engine"]
