"""Command line interface for sqlmigrator."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import get_settings
from .db import create_database_engine
from .errors import MigrationError, RunError
from .loader import add_sql_directory
from .migrator import Migrator
from .models import APPLIED, MigrationResult
from .registry import resolve_dialect

app = typer.Typer(help="Apply SQL migrations exactly once with checksum drift detection.")
console = Console()

_STATUS_STYLES = {
    "applied": "green",
    "already_applied": "dim",
    "failed": "bold red",
    "checksum_mismatch": "bold yellow",
}


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_migrator(
    dsn: Optional[str],
    table: Optional[str],
    schema: Optional[str],
    backend: Optional[str],
) -> Migrator:
    settings = get_settings()
    engine = create_database_engine(dsn or settings.db_dsn)
    try:
        return Migrator(
            engine,
            table or settings.tracking_table,
            schema or settings.schema,
            backend=backend or settings.backend,
        )
    except MigrationError as exc:
        engine.dispose()
        console.print(f"[bold red]BACKEND_ERROR[/bold red]: {exc}")
        raise typer.Exit(code=1) from exc


def _print_results(results: list[MigrationResult]) -> None:
    table = Table("Migration", "Status", "Checksum", "Details")
    for result in results:
        style = _STATUS_STYLES.get(result.status, "")
        table.add_row(
            result.name,
            f"[{style}]{result.status}[/{style}]" if style else result.status,
            result.checksum[:12],
            result.details,
        )
    console.print(table)


def _run_directory(
    migrator: Migrator,
    source: Path,
    repair: list[str],
    *,
    strict: bool,
) -> list[MigrationResult]:
    try:
        add_sql_directory(migrator, source)
    except (FileNotFoundError, MigrationError) as exc:
        console.print(f"[bold red]LOAD_FAILED[/bold red]: {exc}")
        raise typer.Exit(code=1) from exc

    if repair:
        migrator.schedule_repair(*repair)

    try:
        return migrator.run() if strict else migrator.run_unsafe()
    except RunError as exc:
        _print_results(exc.results)
        console.print(f"[bold red]MIGRATION_FAILED[/bold red]: {exc}")
        raise typer.Exit(code=1) from exc


@app.command()
def run(
    directory: Optional[Path] = typer.Argument(None, help="Directory of .sql migration files."),
    unsafe: bool = typer.Option(False, "--unsafe", help="Tolerate checksum drift instead of failing."),
    repair: Optional[List[str]] = typer.Option(
        None, "--repair", help="Migration name whose stored checksum should be rewritten."
    ),
    dsn: Optional[str] = typer.Option(None, help="Database URL; defaults to DB_DSN."),
    table: Optional[str] = typer.Option(None, help="Tracking table name."),
    schema: Optional[str] = typer.Option(None, help="Schema (or MySQL database) of the tracking table."),
    backend: Optional[str] = typer.Option(None, help="Backend key; auto-detected from the driver."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log each step."),
) -> None:
    """Apply pending migrations from a directory."""

    _configure_logging(verbose)
    settings = get_settings()
    migrator = _load_migrator(dsn, table, schema, backend)
    try:
        results = _run_directory(
            migrator,
            directory or settings.migrations_dir,
            repair or [],
            strict=settings.strict and not unsafe,
        )
    finally:
        migrator.engine.dispose()

    _print_results(results)
    applied = sum(1 for result in results if result.status == APPLIED)
    console.print(f"[bold green]Done[/bold green] {applied} applied, {len(results) - applied} unchanged")


@app.command()
def history(
    dsn: Optional[str] = typer.Option(None, help="Database URL; defaults to DB_DSN."),
    table: Optional[str] = typer.Option(None, help="Tracking table name."),
    schema: Optional[str] = typer.Option(None, help="Schema (or MySQL database) of the tracking table."),
    backend: Optional[str] = typer.Option(None, help="Backend key; auto-detected from the driver."),
) -> None:
    """List migrations recorded in the tracking table."""

    migrator = _load_migrator(dsn, table, schema, backend)
    try:
        records = migrator.history()
    finally:
        migrator.engine.dispose()
    if not records:
        console.print("[yellow]No migrations have been applied.[/yellow]")
        return
    output = Table("#", "Migration", "Checksum", "Applied", "Comment")
    for record in records:
        output.add_row(
            str(record.id),
            record.name,
            record.checksum,
            str(record.applied_at or ""),
            record.comment,
        )
    console.print(output)


@app.command()
def dialect(driver: str = typer.Argument(..., help="DBAPI driver or dialect name.")) -> None:
    """Print the backend key a driver name resolves to."""

    console.print(resolve_dialect(driver))


if __name__ == "__main__":  # pragma: no cover
    app()
