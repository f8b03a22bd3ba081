"""Apply a ledger of migrations to one database inside a single transaction."""

from __future__ import annotations

import logging
from typing import Any

import sqlparse
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from .backends import Backend
from .checksum import compute_checksum
from .errors import (
    ChecksumMismatchError,
    RecordInsertError,
    RepairError,
    RunError,
    StatementExecutionError,
    TrackingTableError,
)
from .ledger import MigrationLedger
from .models import (
    ALREADY_APPLIED,
    APPLIED,
    CHECKSUM_MISMATCH,
    FAILED,
    AppliedRecord,
    Migration,
    MigrationResult,
)
from .registry import BackendRegistry, dialect_for_engine, default_registry

logger = logging.getLogger(__name__)


def split_statements(sql: str) -> list[str]:
    """Split a script into statements, dropping parts that hold only comments."""

    return [
        part
        for part in sqlparse.split(sql)
        if sqlparse.format(part, strip_comments=True).strip()
    ]


class Migrator:
    """Run schema migrations against one database.

    Migrations run in the order they were added. Each run opens one
    transaction for checksum repairs, history lookup and every pending
    migration, and commits only when nothing failed. A failed run can be
    retried from scratch once the cause is fixed.

    :meth:`run` aborts when an applied migration's checksum no longer
    matches its current statement; :meth:`run_unsafe` records the drift and
    carries on. Use :meth:`schedule_repair` after intentional cosmetic edits
    so the stored checksum is brought up to date on the next run.

    Instances are not thread-safe; use one per thread or connection.
    """

    def __init__(
        self,
        engine: Engine,
        table_name: str = "migrations",
        schema: str | None = None,
        *,
        backend: str | None = None,
        registry: BackendRegistry | None = None,
    ) -> None:
        self.engine = engine
        self.table_name = table_name
        self.schema = schema
        self.registry = registry if registry is not None else default_registry
        self.ledger = MigrationLedger()
        self._repairs: dict[str, None] = {}
        self.backend_key: str | None = None
        self.backend: Backend
        self.use_backend(backend or dialect_for_engine(engine))

    # Configuration ----------------------------------------------------
    def use_backend(self, key: str) -> None:
        """Bind the backend registered under ``key``, replacing the current one."""

        factory = self.registry.select(key)
        self.backend = factory(self.engine, self.table_name, self.schema)
        self.backend_key = key
        logger.debug("Migrator for table %s using backend %s", self.table_name, key)

    @property
    def migrations(self) -> list[Migration]:
        return list(self.ledger)

    def add_migration(self, name: str, comment: str, statement: str, *args: Any) -> Migration:
        """Add a migration to the end of the ledger.

        ``name`` identifies the migration in the tracking table and must be
        unique; renaming a migration that already ran makes it run again.
        Without ``args`` the statement may be a script of several statements,
        executed in order. ``args`` are bound positionally using the driver's
        paramstyle and require a single statement.
        """

        return self.ledger.add(name, comment, statement, *args)

    def schedule_repair(self, *names: str) -> None:
        """Overwrite the stored checksum of ``names`` at the start of the next run."""

        for name in names:
            self._repairs[name] = None

    @property
    def pending_repairs(self) -> list[str]:
        return list(self._repairs)

    # Running ----------------------------------------------------------
    def run(self) -> list[MigrationResult]:
        """Apply new migrations, failing on checksum drift."""

        return self._run(strict=True)

    def run_unsafe(self) -> list[MigrationResult]:
        """Apply new migrations, tolerating checksum drift."""

        return self._run(strict=False)

    def applied(self) -> dict[str, str]:
        """Return stored checksums by migration name."""

        if not self.backend.table_exists():
            return {}
        return self.backend.fetch_applied()

    def history(self) -> list[AppliedRecord]:
        if not self.backend.table_exists():
            return []
        return self.backend.fetch_records()

    # ------------------------------------------------------------------
    def _run(self, *, strict: bool) -> list[MigrationResult]:
        results: list[MigrationResult] = []
        repairs = list(self._repairs)
        self._repairs.clear()
        logger.info(
            "Running %d migration(s) on table %s in %s mode",
            len(self.ledger),
            self.table_name,
            "safe" if strict else "unsafe",
        )

        self._ensure_tracking_table(results)
        try:
            with self.engine.begin() as conn:
                self._apply_repairs(conn, repairs, results)
                try:
                    applied = self.backend.fetch_applied(conn)
                except Exception as exc:
                    raise TrackingTableError(
                        f"reading '{self.table_name}' table failed: {exc}", results
                    ) from exc
                for migration in self.ledger:
                    self._execute(conn, migration, applied, strict, results)
        except RunError as exc:
            logger.error("Migration run rolled back: %s", exc)
            raise
        except SQLAlchemyError as exc:
            logger.error("Migration run rolled back: %s", exc)
            raise RunError(f"migration transaction failed: {exc}", results) from exc

        logger.info(
            "Migration run committed: %d applied, %d already applied",
            sum(1 for result in results if result.status == APPLIED),
            sum(1 for result in results if result.status == ALREADY_APPLIED),
        )
        return results

    def _ensure_tracking_table(self, results: list[MigrationResult]) -> None:
        try:
            exists = self.backend.table_exists()
        except Exception as exc:
            raise TrackingTableError(
                f"checking for '{self.table_name}' table failed: {exc}", results
            ) from exc
        if exists:
            return

        name = f"create_{self.table_name}_table"
        try:
            ddl = self.backend.create_tracking_table()
        except Exception as exc:
            results.append(MigrationResult(name, "", FAILED, str(exc)))
            raise TrackingTableError(
                f"creating '{self.table_name}' table failed: {exc}", results
            ) from exc
        results.append(
            MigrationResult(name, compute_checksum(ddl), APPLIED, f"created '{self.table_name}' table")
        )
        logger.info("Created migration tracking table %s", self.table_name)

    def _apply_repairs(
        self,
        conn: Connection,
        names: list[str],
        results: list[MigrationResult],
    ) -> None:
        checksums: dict[str, str] = {}
        for name in names:
            migration = self.ledger.get(name)
            if migration is None:
                logger.debug("Skipping checksum repair for unknown migration %s", name)
                continue
            checksums[name] = migration.checksum
        if not checksums:
            return

        try:
            self.backend.repair_checksums(conn, checksums)
        except Exception as exc:
            raise RepairError(f"checksum repair failed: {exc}", results) from exc
        logger.info("Repaired checksums for %s", ", ".join(checksums))

    def _execute(
        self,
        conn: Connection,
        migration: Migration,
        applied: dict[str, str],
        strict: bool,
        results: list[MigrationResult],
    ) -> None:
        name, checksum = migration.name, migration.checksum

        if name in applied:
            stored = applied[name]
            if stored == checksum:
                results.append(MigrationResult(name, checksum, ALREADY_APPLIED, "migration already run"))
                return
            details = f"checksum mismatch stored '{stored}' current '{checksum}'"
            if strict:
                results.append(MigrationResult(name, checksum, CHECKSUM_MISMATCH, details))
                raise ChecksumMismatchError(name, stored, checksum, results)
            logger.warning("Migration %s changed since it was applied: %s", name, details)
            results.append(MigrationResult(name, checksum, ALREADY_APPLIED, details))
            return

        try:
            if migration.args:
                conn.exec_driver_sql(migration.statement, migration.args)
            else:
                for part in split_statements(migration.statement):
                    conn.exec_driver_sql(part)
        except Exception as exc:
            results.append(MigrationResult(name, checksum, FAILED, f"failed: {exc}"))
            raise StatementExecutionError(name, f"migration '{name}' failed: {exc}", results) from exc

        # Rolling back here also undoes the statement above.
        try:
            self.backend.insert_applied(conn, name, checksum, migration.comment)
        except Exception as exc:
            results.append(MigrationResult(name, checksum, FAILED, f"record insert failed: {exc}"))
            raise RecordInsertError(
                name, f"recording migration '{name}' failed: {exc}", results
            ) from exc

        results.append(MigrationResult(name, checksum, APPLIED, "ran migration successfully"))
        logger.info("Applied migration %s", name)


__all__ = ["Migrator", "split_statements"]
