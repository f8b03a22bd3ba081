"""Ordered, name-unique collection of migrations."""

from __future__ import annotations

from typing import Any, Iterator

from .errors import DuplicateMigrationNameError
from .models import Migration


class MigrationLedger:
    """Keep migrations in the order they were added.

    Add order is the only ordering applied at run time. Names are case
    sensitive and may only be used once per ledger.
    """

    def __init__(self) -> None:
        self._migrations: list[Migration] = []
        self._by_name: dict[str, Migration] = {}

    def add(self, name: str, comment: str, statement: str, *args: Any) -> Migration:
        if name in self._by_name:
            raise DuplicateMigrationNameError(name)
        migration = Migration.create(name, comment, statement, *args)
        self._migrations.append(migration)
        self._by_name[name] = migration
        return migration

    def get(self, name: str) -> Migration | None:
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return [migration.name for migration in self._migrations]

    def __iter__(self) -> Iterator[Migration]:
        return iter(list(self._migrations))

    def __len__(self) -> int:
        return len(self._migrations)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name


__all__ = ["MigrationLedger"]
