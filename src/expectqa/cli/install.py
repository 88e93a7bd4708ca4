"""expectqa install — Install browser dependencies (Playwright).

Runs `playwright install` for the requested browsers and reports the result.
"""

from __future__ import annotations

import subprocess
import sys

import typer
from rich.console import Console
from rich.panel import Panel

console = Console()

_INSTALL_TIMEOUT_S = 600


def install(
    browsers: str = typer.Option(
        "chromium",
        "--browsers",
        "-b",
        help="Browsers to install (comma-separated). Options: chromium, firefox, webkit.",
    ),
    ci: bool = typer.Option(
        False,
        "--ci",
        help="Silent mode for CI environments (suppress interactive output).",
    ),
) -> None:
    """Install the Playwright browsers that the ExpectQA adapters drive.

    By default installs Chromium only. Use --browsers to specify others.
    """
    browser_list = [b.strip() for b in browsers.split(",") if b.strip()]
    cmd = [sys.executable, "-m", "playwright", "install", *browser_list]

    if not ci:
        console.print()
        console.print(
            Panel(
                f"Installing browsers: [bold cyan]{', '.join(browser_list)}[/bold cyan]\n\n"
                "This downloads browser binaries via Playwright.",
                title="[bold]ExpectQA Browser Setup[/bold]",
                border_style="blue",
            )
        )

    try:
        with console.status(f"[bold blue]Installing {', '.join(browser_list)}...[/bold blue]", spinner="dots"):
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=_INSTALL_TIMEOUT_S)
    except subprocess.TimeoutExpired:
        console.print(
            Panel(
                "[red]Installation timed out after 10 minutes.[/red]\n\nCheck your network connection and try again.",
                title="[red]Timeout[/red]",
                border_style="red",
            )
        )
        raise typer.Exit(code=3)
    except FileNotFoundError:
        console.print(
            Panel(
                "[red]Playwright is not installed.[/red]\n\nInstall it first:\n  pip install playwright",
                title="[red]Missing Dependency[/red]",
                border_style="red",
            )
        )
        raise typer.Exit(code=3)

    if result.returncode != 0:
        if ci:
            console.print(f"[red]Installation failed (exit {result.returncode})[/red]")
            if result.stderr:
                console.print(f"[dim]{result.stderr.strip()}[/dim]")
        else:
            console.print(
                Panel(
                    f"[red]Playwright install failed (exit code {result.returncode}).[/red]\n\n"
                    f"{result.stderr.strip() if result.stderr else 'No error output.'}\n\n"
                    "[dim]Try running manually:[/dim]\n"
                    f"  {' '.join(cmd)}",
                    title="[red]Installation Failed[/red]",
                    border_style="red",
                )
            )
        raise typer.Exit(code=3)

    if not ci:
        console.print(
            Panel(
                f"[green]Successfully installed: {', '.join(browser_list)}[/green]\n\n"
                "Browser assertions are ready:\n"
                "  [bold]Browser(page).webdriver().should_have(title(...))[/bold]",
                title="[bold green]Installation Complete[/bold green]",
                border_style="green",
            )
        )
