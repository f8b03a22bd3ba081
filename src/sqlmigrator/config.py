"""Runtime configuration helpers for sqlmigrator."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _load_env_file() -> None:
    env_path = Path(".env")
    if not env_path.exists():
        return
    for line in env_path.read_text().splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key, value)


_load_env_file()


def _as_bool(value: str) -> bool:
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    """Typed wrapper around environment-driven configuration."""

    db_dsn: str
    tracking_table: str
    schema: str | None
    migrations_dir: Path
    strict: bool
    backend: str | None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached configuration values loaded from the environment."""

    db_dsn = os.getenv("DB_DSN", "sqlite:///sqlmigrator.db")
    tracking_table = os.getenv("MIGRATIONS_TABLE", "migrations")
    schema = os.getenv("MIGRATIONS_SCHEMA") or None
    migrations_dir = Path(os.getenv("MIGRATIONS_DIR", "migrations"))
    strict = _as_bool(os.getenv("MIGRATIONS_STRICT", "true"))
    backend = os.getenv("MIGRATIONS_BACKEND") or None

    return Settings(
        db_dsn=db_dsn,
        tracking_table=tracking_table,
        schema=schema,
        migrations_dir=migrations_dir,
        strict=strict,
        backend=backend,
    )
