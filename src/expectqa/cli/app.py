"""ExpectQA CLI — Main Typer entry point.

Registers all subcommands and provides --version / --verbose global options.
"""

from __future__ import annotations

import typer
from rich.console import Console

from expectqa import __version__

TAGLINE = "Wait for it. Then tell me exactly why not."

console = Console()

# ── Version callback ──────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        console.print("ExpectQA", style="bold cyan")
        console.print(f"  {TAGLINE}", style="dim")
        console.print(f"  v{__version__}\n", style="bold")
        raise typer.Exit()


# ── Main app ──────────────────────────────────────────────────────────────

app = typer.Typer(
    name="expectqa",
    help=f"ExpectQA\n{TAGLINE}",
    rich_markup_mode="rich",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show ExpectQA version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
) -> None:
    """ExpectQA -- condition polling and failure diagnostics for browser assertions."""
    if verbose:
        import logging

        logging.basicConfig(level=logging.DEBUG, format="%(name)s  %(message)s")


# ── Register subcommands ──────────────────────────────────────────────────

from expectqa.cli.config_cmd import config_app  # noqa: E402
from expectqa.cli.init_cmd import init  # noqa: E402
from expectqa.cli.install import install  # noqa: E402

app.command(name="init", help="Initialize a .expectqa/ project directory.")(init)
app.command(name="install", help="Install browser dependencies (Playwright).")(install)
app.add_typer(config_app, name="config", help="View and manage ExpectQA configuration.")
