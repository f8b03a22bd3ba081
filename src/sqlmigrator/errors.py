"""Exceptions raised while configuring or running migrations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .models import MigrationResult


class MigrationError(RuntimeError):
    """Base class for every error raised by sqlmigrator."""


class DuplicateMigrationNameError(MigrationError):
    """A migration with the same name was already added to the ledger."""

    def __init__(self, name: str) -> None:
        super().__init__(f"migration '{name}' already exists")
        self.name = name


class UnknownBackendError(MigrationError):
    """No backend is registered under the requested key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"backend '{key}' is not a registered backend")
        self.key = key


class BackendAlreadyRegisteredError(MigrationError):
    """A backend is already registered under the requested key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"backend with key '{key}' already exists")
        self.key = key


class RunError(MigrationError):
    """A run aborted; ``results`` holds every entry produced before the abort."""

    def __init__(self, message: str, results: Sequence[MigrationResult] = ()) -> None:
        super().__init__(message)
        self.results: list[MigrationResult] = list(results)


class TrackingTableError(RunError):
    """Checking for or creating the tracking table failed."""


class RepairError(RunError):
    """Writing a repaired checksum failed."""


class MigrationStepError(RunError):
    """A run failed while handling the migration called ``name``."""

    def __init__(self, name: str, message: str, results: Sequence[MigrationResult] = ()) -> None:
        super().__init__(message, results)
        self.name = name


class StatementExecutionError(MigrationStepError):
    """A migration statement raised while executing."""


class RecordInsertError(MigrationStepError):
    """The statement ran but recording it in the tracking table failed."""


class ChecksumMismatchError(RunError):
    """The stored checksum of an applied migration differs from the current one."""

    def __init__(
        self,
        name: str,
        stored: str,
        current: str,
        results: Sequence[MigrationResult] = (),
    ) -> None:
        super().__init__(
            f"{name} checksum mismatch stored '{stored}' current '{current}'",
            results,
        )
        self.name = name
        self.stored = stored
        self.current = current


__all__ = [
    "BackendAlreadyRegisteredError",
    "ChecksumMismatchError",
    "DuplicateMigrationNameError",
    "MigrationError",
    "MigrationStepError",
    "RecordInsertError",
    "RepairError",
    "RunError",
    "StatementExecutionError",
    "TrackingTableError",
    "UnknownBackendError",
]
