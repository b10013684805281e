"""Console output helpers for the CLI."""

from __future__ import annotations

from typing import NoReturn

import typer
from rich.console import Console

console = Console()
err_console = Console(stderr=True)


def error(msg: str, code: int = 1) -> NoReturn:
    """Print an error message and exit with ``code``."""
    err_console.print(f"[bold red]Error:[/bold red] {msg}")
    raise typer.Exit(code)


def success(msg: str) -> None:
    console.print(f"[bold green]✓[/bold green] {msg}")


def info(msg: str) -> None:
    console.print(f"[dim]→[/dim] {msg}")


def warn(msg: str) -> None:
    console.print(f"[yellow]Warning:[/yellow] {msg}")
