"""CLI for reviewing snapshot files."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from snapassert.models.config import AssertConfig
from snapassert.snapshot.store import SnapshotStore

console = Console()


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load_store(config: str, snapshot_dir: str | None) -> SnapshotStore:
    if snapshot_dir:
        return SnapshotStore(Path(snapshot_dir))
    if Path(config).exists():
        return SnapshotStore(AssertConfig.load(config).snapshot_path)
    return SnapshotStore(AssertConfig().snapshot_path)


def _key_of(path: Path) -> str:
    return path.name.split(".", 1)[0]


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Retrying assertions and golden snapshots"""
    setup_logging(verbose)


@cli.command()
@click.option("--config", "-c", default="snapassert.json", help="Config file path")
@click.option("--snapshot-dir", "-d", default=None, help="Override the snapshot directory")
def status(config: str, snapshot_dir: str | None) -> None:
    """List expected snapshots and pending actual artifacts."""
    store = _load_store(config, snapshot_dir)
    pending = {_key_of(p) for p in store.pending_actuals()}

    table = Table(title=f"Snapshots in {store.snapshot_dir}")
    table.add_column("Key", style="bold")
    table.add_column("Type")
    table.add_column("Status")
    for path in store.expected_artifacts():
        key = _key_of(path)
        state = "[red]mismatch[/red]" if key in pending else "[green]ok[/green]"
        table.add_row(key, path.suffix.lstrip("."), state)
    console.print(table)

    if pending:
        console.print(f"[yellow]{len(pending)} snapshot(s) awaiting review[/yellow]")


@cli.command()
@click.argument("keys", nargs=-1)
@click.option("--all", "approve_all", is_flag=True, help="Approve every pending actual artifact")
@click.option("--config", "-c", default="snapassert.json", help="Config file path")
@click.option("--snapshot-dir", "-d", default=None, help="Override the snapshot directory")
def approve(keys: tuple[str, ...], approve_all: bool, config: str, snapshot_dir: str | None) -> None:
    """Promote actual artifacts to expected."""
    store = _load_store(config, snapshot_dir)
    if approve_all:
        keys = tuple(sorted({_key_of(p) for p in store.pending_actuals()}))
    if not keys:
        console.print("[yellow]Nothing to approve[/yellow]")
        return

    missing = []
    for key in keys:
        promoted = store.approve(key)
        if promoted:
            for path in promoted:
                console.print(f"[green]Approved[/green] {path.name}")
        else:
            missing.append(key)
    if missing:
        console.print(f"[red]No actual artifact for: {', '.join(missing)}[/red]")
        sys.exit(1)


@cli.command()
@click.option("--config", "-c", default="snapassert.json", help="Config file path")
@click.option("--snapshot-dir", "-d", default=None, help="Override the snapshot directory")
def clean(config: str, snapshot_dir: str | None) -> None:
    """Delete all actual artifacts."""
    store = _load_store(config, snapshot_dir)
    removed = store.clean_actuals()
    console.print(f"[green]Removed {removed} actual artifact(s)[/green]")


@cli.command()
@click.option("--config", "-c", default="snapassert.json", help="Config file path")
@click.option("--snapshot-dir", default="tests/__snapshots__", help="Snapshot directory")
@click.option("--timeout", default=10.0, type=float, help="Assertion timeout in seconds")
def init(config: str, snapshot_dir: str, timeout: float) -> None:
    """Create a default configuration file."""
    config_path = Path(config)
    if config_path.exists():
        if not click.confirm(f"{config} already exists. Overwrite?"):
            return

    cfg = AssertConfig(snapshot_dir=snapshot_dir, timeout_seconds=timeout)
    cfg.save(config_path)
    console.print(f"[green]Created {config_path}[/green]")


if __name__ == "__main__":
    cli()
