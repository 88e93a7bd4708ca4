"""expectqa init — Initialize a .expectqa/ project directory.

Creates the directory structure and a commented config.yaml template that
assertions pick up as their process-wide defaults.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.tree import Tree

from expectqa.models import (
    CONFIG_FILENAME,
    DEFAULT_POLL_INTERVAL_MS,
    DEFAULT_PROJECT_DIR,
    DEFAULT_REPORTS_DIR,
    DEFAULT_TIMEOUT_MS,
)

console = Console()

_SAMPLE_CONFIG = f"""\
# ExpectQA project configuration
# Environment variables (EXPECTQA_TIMEOUT_MS, ...) take priority over this file.

# How long should_have / should_not_have keep polling (milliseconds)
timeout_ms: {DEFAULT_TIMEOUT_MS}

# Pause between two polls (milliseconds)
poll_interval_ms: {DEFAULT_POLL_INTERVAL_MS}

# Capture a screenshot and the page source when an assertion fails
screenshots: true
page_source: true

# Write a markdown report for every failed assertion
save_reports: false

# Where screenshots, page sources and reports go (relative to this directory)
reports_dir: {DEFAULT_REPORTS_DIR}
"""


def init(
    dir: Path = typer.Option(
        Path("."),
        "--dir",
        "-d",
        help="Parent directory for .expectqa/ project. Defaults to current directory.",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing .expectqa/ directory.",
    ),
) -> None:
    """Initialize a new ExpectQA project directory.

    Creates .expectqa/ with a reports/ subdirectory and a config.yaml template.
    """
    project_dir = dir.resolve() / DEFAULT_PROJECT_DIR

    if project_dir.exists() and not force:
        console.print(
            Panel(
                f"[yellow]Directory already exists:[/yellow] {project_dir}\n\nUse [bold]--force[/bold] to overwrite.",
                title="Already Initialized",
                border_style="yellow",
            )
        )
        raise typer.Exit(code=2)

    (project_dir / DEFAULT_REPORTS_DIR).mkdir(parents=True, exist_ok=True)

    config_path = project_dir / CONFIG_FILENAME
    config_path.write_text(_SAMPLE_CONFIG, encoding="utf-8")

    # Failure artifacts are run output, not source
    gitignore_path = project_dir.parent / ".gitignore"
    reports_entry = f"{DEFAULT_PROJECT_DIR}/{DEFAULT_REPORTS_DIR}/"
    if gitignore_path.exists():
        existing = gitignore_path.read_text(encoding="utf-8")
        if reports_entry not in existing:
            gitignore_path.write_text(
                existing.rstrip("\n") + f"\n\n# ExpectQA failure artifacts\n{reports_entry}\n",
                encoding="utf-8",
            )
    else:
        gitignore_path.write_text(f"# ExpectQA failure artifacts\n{reports_entry}\n", encoding="utf-8")

    tree = Tree(f"[bold green]{project_dir}[/bold green]", guide_style="dim")
    tree.add(f"[cyan]{CONFIG_FILENAME}[/cyan]")
    tree.add(f"[blue]{DEFAULT_REPORTS_DIR}/[/blue]")

    console.print()
    console.print(
        Panel(
            tree,
            title="[bold green]ExpectQA Initialized[/bold green]",
            border_style="green",
        )
    )
    console.print()
    console.print("[dim]Next steps:[/dim]")
    console.print(f"  1. Tune timeouts in [cyan]{DEFAULT_PROJECT_DIR}/{CONFIG_FILENAME}[/cyan]")
    console.print("  2. Run [bold]expectqa install[/bold] to set up Playwright")
    console.print()
