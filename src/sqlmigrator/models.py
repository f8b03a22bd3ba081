"""Domain models shared by the ledger, the backends and the run engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

from .checksum import compute_checksum

MigrationStatus = Literal["applied", "already_applied", "failed", "checksum_mismatch"]

APPLIED: MigrationStatus = "applied"
ALREADY_APPLIED: MigrationStatus = "already_applied"
FAILED: MigrationStatus = "failed"
CHECKSUM_MISMATCH: MigrationStatus = "checksum_mismatch"


@dataclass(frozen=True, slots=True)
class Migration:
    """A named SQL statement intended to run at most once per database."""

    name: str
    comment: str
    statement: str
    args: tuple[Any, ...]
    checksum: str

    @classmethod
    def create(cls, name: str, comment: str, statement: str, *args: Any) -> Migration:
        return cls(
            name=name,
            comment=comment,
            statement=statement,
            args=tuple(args),
            checksum=compute_checksum(statement, args),
        )


@dataclass(slots=True)
class MigrationResult:
    """Outcome of one migration attempted during a run."""

    name: str
    checksum: str
    status: MigrationStatus
    details: str

    @property
    def ok(self) -> bool:
        return self.status in (APPLIED, ALREADY_APPLIED)

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "checksum": self.checksum,
            "status": self.status,
            "details": self.details,
        }


@dataclass(slots=True)
class AppliedRecord:
    """One row of the tracking table."""

    id: int
    name: str
    checksum: str
    applied_at: datetime | str | None
    comment: str


__all__ = [
    "ALREADY_APPLIED",
    "APPLIED",
    "AppliedRecord",
    "CHECKSUM_MISMATCH",
    "FAILED",
    "Migration",
    "MigrationResult",
    "MigrationStatus",
]
