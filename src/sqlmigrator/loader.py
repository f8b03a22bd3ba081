"""Load migrations from a directory of ``.sql`` files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from .models import Migration

if TYPE_CHECKING:
    from .migrator import Migrator


@dataclass(frozen=True, slots=True)
class SqlFile:
    """A migration read from disk; the file stem is its name."""

    name: str
    comment: str
    statement: str
    path: Path


def _leading_comment(statement: str) -> str:
    lines: list[str] = []
    for line in statement.splitlines():
        stripped = line.strip()
        if not stripped:
            if lines:
                break
            continue
        if not stripped.startswith("--"):
            break
        lines.append(stripped.lstrip("-").strip())
    return " ".join(part for part in lines if part)


def _is_migration_file(path: Path) -> bool:
    return path.is_file() and not path.name.startswith("MANUAL_")


def load_sql_directory(directory: Path) -> list[SqlFile]:
    """Return the migrations in ``directory`` sorted by filename.

    Files prefixed ``MANUAL_`` are left for operators to run by hand and
    ``.bak`` copies are ignored (only ``*.sql`` is globbed).
    """

    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"migration directory missing: {directory}")
    files: list[SqlFile] = []
    for path in sorted(directory.glob("*.sql")):
        if not _is_migration_file(path):
            continue
        statement = path.read_text(encoding="utf-8")
        files.append(
            SqlFile(
                name=path.stem,
                comment=_leading_comment(statement),
                statement=statement,
                path=path,
            )
        )
    return files


def add_sql_directory(migrator: Migrator, directory: Path) -> list[Migration]:
    """Add every migration file in ``directory`` to ``migrator`` in filename order."""

    return [
        migrator.add_migration(sql_file.name, sql_file.comment, sql_file.statement)
        for sql_file in load_sql_directory(directory)
    ]


__all__ = ["SqlFile", "add_sql_directory", "load_sql_directory"]
