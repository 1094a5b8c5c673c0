# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Typer CLI for inspecting and purging snapshot files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import typer

from snapcache.core.config import get_settings
from snapcache.core.exceptions import DecodeError, PersistenceError, SnapcacheError
from snapcache.models.cache import CacheConfig, SnapshotEntry, utcnow

app = typer.Typer(
    name="snapcache",
    help="Inspect and manage snapcache snapshot files",
    no_args_is_help=True,
)

_PREVIEW_WIDTH = 60

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Snapshot directory (default: SNAPCACHE_DATA_DIR)"),
]
NameOption = Annotated[
    str | None,
    typer.Option("--name", "-n", help="Snapshot file name without .json"),
]


def _identity(value: Any) -> Any:
    return value


def _resolve_config(data_dir: Path | None, name: str | None) -> CacheConfig:
    settings = get_settings()
    config = CacheConfig(
        data_dir=data_dir or settings.data_dir,
        cache_file_name=name or settings.cache_file_name,
        value_conversion_fn=_identity,
    )
    if config.data_dir is None:
        typer.echo("No data directory given (use --data-dir or SNAPCACHE_DATA_DIR).", err=True)
        raise typer.Exit(1)
    return config


def _read(config: CacheConfig) -> dict[str, SnapshotEntry]:
    from snapcache.persistence import SnapshotPersistence

    try:
        return SnapshotPersistence(config.file_path, _identity).read_snapshot()
    except DecodeError as exc:
        typer.echo(f"Malformed snapshot: {exc}", err=True)
        raise typer.Exit(1) from exc
    except PersistenceError as exc:
        typer.echo(f"Cannot read snapshot: {exc}", err=True)
        raise typer.Exit(1) from exc


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log library activity to stderr")
    ] = False,
) -> None:
    if verbose:
        from snapcache.core.logging import setup_logging

        settings = get_settings()
        setup_logging("DEBUG", settings.log_format, settings.credentials_path)


@app.command()
def info(data_dir: DataDirOption = None, name: NameOption = None) -> None:
    """Summarise a snapshot file."""
    from rich.console import Console
    from rich.table import Table

    config = _resolve_config(data_dir, name)
    snapshot = _read(config)
    now = utcnow()
    expired = sum(1 for entry in snapshot.values() if entry.is_expired(now))

    table = Table(title="Cache Snapshot")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Path", str(config.file_path))
    table.add_row("Size (bytes)", str(config.file_path.stat().st_size))
    table.add_row("Entries", str(len(snapshot)))
    table.add_row("Live", str(len(snapshot) - expired))
    table.add_row("Expired", str(expired))
    Console().print(table)


@app.command()
def show(
    data_dir: DataDirOption = None,
    name: NameOption = None,
    include_expired: Annotated[
        bool, typer.Option("--all", "-a", help="Include expired entries")
    ] = False,
) -> None:
    """List the entries of a snapshot file."""
    from rich.console import Console
    from rich.table import Table

    config = _resolve_config(data_dir, name)
    snapshot = _read(config)
    now = utcnow()

    table = Table(title=f"Entries in {config.file_path.name}")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Expiration")
    table.add_column("Live")
    table.add_column("Value")

    for key in sorted(snapshot):
        entry = snapshot[key]
        live = not entry.is_expired(now)
        if not live and not include_expired:
            continue
        preview = json.dumps(entry.object, default=str)
        if len(preview) > _PREVIEW_WIDTH:
            preview = preview[: _PREVIEW_WIDTH - 3] + "..."
        table.add_row(
            key,
            entry.expiration.isoformat() if entry.expiration else "never",
            "yes" if live else "no",
            preview,
        )

    Console().print(table)


@app.command()
def purge(
    data_dir: DataDirOption = None,
    name: NameOption = None,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation")] = False,
) -> None:
    """Delete a snapshot file and, when configured, its remote copy."""
    from snapcache.service import CacheService, cloud_config_from_settings

    config = _resolve_config(data_dir, name)
    if not config.file_path.exists():
        typer.echo(f"No snapshot at {config.file_path}.", err=True)
        raise typer.Exit(1)
    if not yes:
        typer.confirm(f"Delete {config.file_path}?", abort=True)

    settings = get_settings()
    try:
        service = CacheService(
            config,
            cloud_config_from_settings(settings),
            timeout=settings.remote_timeout,
        )
    except SnapcacheError as exc:
        typer.echo(f"Cannot open cache: {exc}", err=True)
        raise typer.Exit(1) from exc

    try:
        service.clear_file()
    except SnapcacheError as exc:
        typer.echo(f"Purge incomplete: {exc}", err=True)
        raise typer.Exit(1) from exc
    finally:
        try:
            service.clear()
        except SnapcacheError as exc:
            typer.echo(f"Warning: cache not closed cleanly: {exc}", err=True)

    typer.echo(f"Removed {config.file_path}.")


@app.command()
def version() -> None:
    """Show version information."""
    from snapcache import __version__

    typer.echo(f"snapcache v{__version__}")
