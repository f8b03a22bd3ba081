"""sqlmigrator package exports."""

from .checksum import compute_checksum
from .config import get_settings
from .db import create_database_engine
from .errors import (
    BackendAlreadyRegisteredError,
    ChecksumMismatchError,
    DuplicateMigrationNameError,
    MigrationError,
    RecordInsertError,
    RepairError,
    RunError,
    StatementExecutionError,
    TrackingTableError,
    UnknownBackendError,
)
from .loader import add_sql_directory, load_sql_directory
from .migrator import Migrator
from .models import AppliedRecord, Migration, MigrationResult
from .registry import UNKNOWN, BackendRegistry, register_backend, resolve_dialect

__all__ = [
    "AppliedRecord",
    "BackendAlreadyRegisteredError",
    "BackendRegistry",
    "ChecksumMismatchError",
    "DuplicateMigrationNameError",
    "Migration",
    "MigrationError",
    "MigrationResult",
    "Migrator",
    "RecordInsertError",
    "RepairError",
    "RunError",
    "StatementExecutionError",
    "TrackingTableError",
    "UNKNOWN",
    "UnknownBackendError",
    "add_sql_directory",
    "compute_checksum",
    "create_database_engine",
    "get_settings",
    "load_sql_directory",
    "register_backend",
    "resolve_dialect",
]
