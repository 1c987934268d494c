"""Typer CLI: init, write, status commands."""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from logroller import __version__

app = typer.Typer(
    name="logroller",
    help="Append to log files with date- and size-based rolling.",
    no_args_is_help=True,
)
console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"logroller v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", help="Show version.", callback=_version_callback, is_eager=True
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug diagnostics"),
) -> None:
    """logroller - rolling log writer."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


def _load_engine(log_file: Path, config_path: Path | None, project_dir: Path):
    from logroller.config import load_config, policy_from_config
    from logroller.roller import open_rolling_log

    config = load_config(project_dir, path=config_path)
    try:
        policy = policy_from_config(config)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)
    return open_rolling_log(log_file, policy)


@app.command()
def init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
    project_dir: Path = typer.Option(Path.cwd(), "--dir", help="Project directory"),
) -> None:
    """Write a default .logroller/config.json."""
    from logroller.config import DEFAULT_CONFIG, config_path_for, save_config, validate_config
    from logroller.utils import deep_merge, load_mapping

    config_path = config_path_for(project_dir)
    if config_path.exists() and not force:
        config = deep_merge(DEFAULT_CONFIG, load_mapping(config_path))
        console.print("  [yellow]Merged with existing config[/yellow]")
    else:
        config = DEFAULT_CONFIG.copy()
        console.print("  [green]Created default config[/green]")

    errors = validate_config(config)
    if errors:
        for e in errors:
            console.print(f"  [red]Config error: {e}[/red]")
        raise typer.Exit(1)

    save_config(config, project_dir)
    console.print(
        Panel(
            f"Config: [cyan]{config_path}[/cyan]\n"
            f"  Interval: {config['rolling_interval']}\n"
            f"  Max size: {config['max_log_file_weight']} bytes\n"
            f"  Backups kept: {config['max_log_backups']} per policy",
            title="Ready",
            style="green",
        )
    )


@app.command()
def write(
    log_file: Path = typer.Argument(..., help="Log file to append to"),
    message: str = typer.Argument(..., help="Message to append, or '-' to read lines from stdin"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Config file (JSON or YAML)"),
    project_dir: Path = typer.Option(Path.cwd(), "--dir", help="Project directory"),
) -> None:
    """Append a message, rolling the log first if a policy requires it."""
    from logroller.errors import RollError

    engine = _load_engine(log_file, config_path, project_dir)
    if message == "-":
        messages = [line.rstrip("\n") for line in sys.stdin if line.strip()]
    else:
        messages = [message]

    for msg in messages:
        try:
            outcome = engine.write(msg)
        except RollError as exc:
            console.print(f"[red]Roll failed, message not written:[/red] {exc}")
            raise typer.Exit(1)
        if outcome.date_backup:
            console.print(f"  Rolled by date: [cyan]{outcome.date_backup.name}[/cyan]")
        if outcome.size_backup:
            console.print(f"  Rolled by size: [cyan]{outcome.size_backup.name}[/cyan]")

    console.print(f"[green]Wrote {len(messages)} message(s) to[/green] {log_file}")


@app.command()
def status(
    log_file: Path = typer.Argument(..., help="Log file to inspect"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Config file (JSON or YAML)"),
    project_dir: Path = typer.Option(Path.cwd(), "--dir", help="Project directory"),
) -> None:
    """Show policy, live file state, and known backups."""
    engine = _load_engine(log_file, config_path, project_dir)
    policy = engine.policy

    console.print(Panel(f"[bold]{log_file}[/bold]", style="blue"))
    console.print(
        f"  Policy: interval=[cyan]{policy.rolling_interval.value}[/cyan] "
        f"max_size=[cyan]{policy.max_log_file_weight}[/cyan] "
        f"backups=[cyan]{policy.max_log_backups}[/cyan]"
    )

    if engine.sink.exists():
        modified = engine.sink.modification_time().isoformat(timespec="seconds")
        console.print(f"  Live file: [cyan]{engine.sink.size()} bytes[/cyan], modified {modified}")
    else:
        console.print("  Live file: [dim]not created yet[/dim]")

    due_date = "[yellow]yes[/yellow]" if engine.should_roll_by_date() else "no"
    due_size = "[yellow]yes[/yellow]" if engine.should_roll_by_size() else "no"
    console.print(f"  Date roll due: {due_date}    Size roll due: {due_size}")

    for title, history in (
        ("Date backups", engine.date_history),
        ("Size backups", engine.size_history),
    ):
        table = Table(title=f"{title} ({len(history)})")
        table.add_column("#", width=4)
        table.add_column("Name")
        table.add_column("Modified", width=20)
        for i, entry in enumerate(history, start=1):
            try:
                mtime = datetime.fromtimestamp(engine.fs.modification_time(entry.path))
                shown = mtime.isoformat(sep=" ", timespec="seconds")
            except OSError:
                shown = "[red]missing[/red]"
            table.add_row(str(i), entry.name, shown)
        console.print(table)
