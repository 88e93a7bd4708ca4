"""expectqa config — View and manage ExpectQA configuration.

Subcommands: show, set.
"""

from __future__ import annotations

import os
from pathlib import Path

import typer
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from expectqa.config import (
    _BOOL_KEYS,
    _INT_KEYS,
    ENV_OVERRIDES,
    ExpectQAConfig,
    ExpectQAConfigError,
    _coerce_bool,
    load_config,
)
from expectqa.models import CONFIG_FILENAME, DEFAULT_PROJECT_DIR

console = Console()

config_app = typer.Typer(
    name="config",
    help="View and manage ExpectQA configuration.",
    no_args_is_help=True,
)

_PATH_KEYS = ("reports_dir",)
_KNOWN_KEYS = _INT_KEYS + _BOOL_KEYS + _PATH_KEYS


def _find_project_dir() -> Path:
    """Locate the .expectqa/ project directory by searching upward from cwd."""
    current = Path.cwd()
    for base in [current, *current.parents]:
        candidate = base / DEFAULT_PROJECT_DIR
        if candidate.is_dir():
            return candidate
    return current / DEFAULT_PROJECT_DIR


def _load_raw_config(project_dir: Path) -> dict:
    """Load the raw YAML config dict."""
    config_path = project_dir / CONFIG_FILENAME
    if not config_path.is_file():
        return {}
    try:
        with open(config_path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError:
        return {}


def _save_raw_config(project_dir: Path, data: dict) -> None:
    """Write the config dict to config.yaml."""
    config_path = project_dir / CONFIG_FILENAME
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def _value_source(key: str, raw: dict) -> str:
    """Name where the effective value of ``key`` comes from."""
    for env_name, field_name in ENV_OVERRIDES.items():
        if field_name == key and os.environ.get(env_name):
            return f"env: {env_name}"
    if key in raw:
        return CONFIG_FILENAME
    return "default"


@config_app.command(name="show")
def config_show(
    dir: Path | None = typer.Option(
        None,
        "--dir",
        "-d",
        help="Path to .expectqa/ directory.",
    ),
) -> None:
    """Show the resolved ExpectQA configuration.

    Displays all effective config values, merging environment variables,
    config.yaml and defaults.
    """
    project_dir = dir or _find_project_dir()
    config_path = project_dir / CONFIG_FILENAME

    try:
        config = load_config(project_dir)
    except ExpectQAConfigError as exc:
        console.print(Panel(f"[red]{exc}[/red]", title="[red]Config Error[/red]", border_style="red"))
        raise typer.Exit(code=2)

    raw = _load_raw_config(project_dir)

    table = Table(title="ExpectQA Configuration", border_style="cyan")
    table.add_column("Setting", style="bold")
    table.add_column("Value", overflow="fold")
    table.add_column("Source", style="dim", no_wrap=True)

    table.add_row("Project Dir", str(project_dir), "resolved")
    table.add_row("Config File", str(config_path), "exists" if config_path.is_file() else "missing")
    table.add_row("", "", "")
    table.add_row("Timeout", f"{config.timeout_ms} ms", _value_source("timeout_ms", raw))
    table.add_row("Poll Interval", f"{config.poll_interval_ms} ms", _value_source("poll_interval_ms", raw))
    table.add_row("Screenshots", str(config.screenshots), _value_source("screenshots", raw))
    table.add_row("Page Source", str(config.page_source), _value_source("page_source", raw))
    table.add_row("Save Reports", str(config.save_reports), _value_source("save_reports", raw))
    table.add_row("Reports Dir", str(config.reports_dir), _value_source("reports_dir", raw))

    console.print()
    console.print(table)
    console.print()


@config_app.command(name="set")
def config_set(
    key: str = typer.Argument(..., help="Configuration key to set."),
    value: str = typer.Argument(..., help="Value to set."),
    dir: Path | None = typer.Option(
        None,
        "--dir",
        "-d",
        help="Path to .expectqa/ directory.",
    ),
) -> None:
    """Set a configuration value in .expectqa/config.yaml.

    Examples:
      expectqa config set timeout_ms 10000
      expectqa config set poll_interval_ms 100
      expectqa config set save_reports true
    """
    if key not in _KNOWN_KEYS:
        console.print(f"[red]Unknown configuration key:[/red] {key}")
        console.print(f"[dim]Known keys: {', '.join(_KNOWN_KEYS)}[/dim]")
        raise typer.Exit(code=2)

    project_dir = dir or _find_project_dir()
    data = _load_raw_config(project_dir)

    coerced_value: object = value
    if key in _INT_KEYS:
        try:
            coerced_value = int(value)
        except ValueError:
            console.print(f"[red]Invalid integer value for '{key}':[/red] {value}")
            raise typer.Exit(code=2)
    elif key in _BOOL_KEYS:
        coerced_value = _coerce_bool(value)

    data[key] = coerced_value

    # Reject values the engine would refuse at load time
    try:
        ExpectQAConfig._from_dict(data, project_dir)
    except ExpectQAConfigError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2)

    _save_raw_config(project_dir, data)

    console.print(f"[green]Set[/green] {key} = {coerced_value} [dim]in {project_dir / CONFIG_FILENAME}[/dim]")
