"""Command-line interface for seekarr."""

from __future__ import annotations

import asyncio
import os
from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003 - needed at runtime for typer
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.table import Table

from seekarr.config import Config, ConfigurationError, validate_log_level
from seekarr.logging_utils import configure_logging
from seekarr.scheduler import build_executors, run_all, run_forever
from seekarr.state import JsonSearchHistoryStore

if TYPE_CHECKING:
    from seekarr.scheduler import RunRecord

app = typer.Typer(
    name="seekarr",
    help="Trigger rate-limited searches for missing and upgradable items in Radarr/Sonarr.",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)


def _resolve_log_level(cli_level: str | None, config_path: Path | None) -> str:
    """Pick the log level: CLI flag, then environment, then config file, then info."""
    if cli_level:
        return cli_level
    env_level = os.environ.get("SEEKARR_LOG_LEVEL")
    if env_level:
        return env_level
    try:
        return Config.load(config_path).logging.level
    except ConfigurationError:
        return "info"


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to config.toml (default: ~/.config/seekarr)"),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            "-l",
            help="Logging level (debug, info, warning, error, critical).",
        ),
    ] = None,
) -> None:
    """Configure logging and remember global options for subcommands."""
    level = _resolve_log_level(log_level, config_path)
    try:
        level = validate_log_level(level)
    except ConfigurationError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    configure_logging(level)
    ctx.obj = {"config_path": config_path}


def _load_config(ctx: typer.Context) -> Config:
    """Load config for a subcommand, exiting with code 2 when it is invalid."""
    config_path = (ctx.obj or {}).get("config_path")
    try:
        return Config.load(config_path)
    except ConfigurationError as e:
        error_console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(2) from e


def format_instances_table(config: Config) -> Table:
    """Build a table summarizing configured instances."""
    table = Table(title="Instances")
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    table.add_column("URL")
    table.add_column("Mode")
    table.add_column("Limit", justify="right")
    table.add_column("Rate/min", justify="right")
    table.add_column("History")
    table.add_column("Dry run")

    for inst in config.instances:
        table.add_row(
            inst.name,
            inst.type.value,
            inst.url,
            inst.search_mode.value,
            str(inst.search_limit),
            str(inst.rate_limit_per_minute),
            f"{inst.search_frequency_hours:g}h" if inst.history_enabled else "off",
            "[yellow]yes[/yellow]" if inst.dry_run else "no",
        )
    return table


def format_run_table(records: list[RunRecord]) -> Table:
    """Build a table summarizing one pass over all instances."""
    table = Table(title="Run summary")
    table.add_column("Instance", style="cyan")
    table.add_column("Status")
    table.add_column("Found", justify="right")
    table.add_column("Skipped", justify="right")
    table.add_column("Selected", justify="right")
    table.add_column("Searched", justify="right")
    table.add_column("Errors", justify="right")

    for rec in records:
        status_style = "red" if rec.errors else "green"
        table.add_row(
            rec.instance_name,
            f"[{status_style}]{rec.status.value}[/{status_style}]",
            str(rec.candidates_found),
            str(rec.skipped_recent),
            str(len(rec.selected_ids)),
            str(len(rec.searched_ids)),
            str(len(rec.errors)),
        )
    return table


@app.command()
def run(
    ctx: typer.Context,
    once: Annotated[
        bool, typer.Option("--once", help="Run every instance once and exit")
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Log what would be searched without searching"),
    ] = False,
) -> None:
    """Search every configured instance, once or on the configured interval.

    Example:
        seekarr run --once --dry-run
        seekarr --config /app/config/config.toml run
    """
    config = _load_config(ctx)
    if dry_run:
        config.instances = [replace(inst, dry_run=True) for inst in config.instances]

    console.print(format_instances_table(config))
    executors = build_executors(config)

    interval = 0 if once else config.schedule.interval_minutes
    if interval == 0:
        records = asyncio.run(run_all(executors))
        console.print(format_run_table(records))
        return

    console.print(f"Running every {interval} minutes. Press Ctrl+C to stop.")
    try:
        asyncio.run(run_forever(executors, interval))
    except KeyboardInterrupt:
        console.print("[dim]Stopped.[/dim]")


@app.command()
def validate(ctx: typer.Context) -> None:
    """Check the config file and show the configured instances."""
    config = _load_config(ctx)
    console.print(format_instances_table(config))
    schedule = config.schedule.interval_minutes
    console.print(f"Schedule: {'run once' if schedule == 0 else f'every {schedule} minutes'}")
    console.print(f"Data dir: {config.data_dir}")
    console.print("[green]Configuration is valid.[/green]")


@app.command()
def history(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Instance name")],
) -> None:
    """Show which items an instance searched within its frequency window."""
    config = _load_config(ctx)
    try:
        inst = config.get_instance(name)
    except ConfigurationError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2) from e

    if not inst.history_enabled:
        console.print(f"Search history is disabled for '{name}' (search_frequency_hours = 0).")
        return

    empty_message = f"No recent searches recorded for '{name}'."
    # Building a store creates data_dir, which this command must not do
    if not (config.data_dir / f"{inst.name}.json").exists():
        console.print(empty_message)
        return

    store = JsonSearchHistoryStore(config.data_dir, inst.name, inst.search_frequency_hours)
    entries = store.entries()
    recent = set(store.filter_recent(entries))
    if not recent:
        console.print(empty_message)
        return

    table = Table(title=f"Search history: {name}")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Last searched")
    for item_id, ts in sorted(entries.items(), key=lambda kv: kv[1], reverse=True):
        if item_id not in recent:
            continue
        last = datetime.fromtimestamp(ts / 1000, tz=UTC)
        table.add_row(str(item_id), last.isoformat(timespec="seconds"))
    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from seekarr import __version__

    console.print(f"seekarr version {__version__}")


if __name__ == "__main__":
    app()
