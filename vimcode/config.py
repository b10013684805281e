"""Loading of the vimcode configuration file and logging setup."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

console = Console()

# --- Config File Loading ---

CONFIG_PATH = Path.home() / ".config" / "vimcode" / "config.toml"
CONFIG_PATH_2 = Path("vimcode-config.toml")


def _normalise_keys(table: dict[str, Any]) -> dict[str, Any]:
    """Turn dashed keys into underscores so they match option names."""
    return {
        key.replace("-", "_"): _normalise_keys(value) if isinstance(value, dict) else value
        for key, value in table.items()
    }


def _find_config(config_path_str: str | None) -> Path | None:
    """Return the explicit path, else the first default config that exists."""
    if config_path_str:
        return Path(config_path_str)
    return next((path for path in (CONFIG_PATH, CONFIG_PATH_2) if path.exists()), None)


def load_config(config_path_str: str | None = None) -> dict[str, Any]:
    """Load the TOML config file, or return ``{}`` when there is none or it is invalid."""
    config_path = _find_config(config_path_str)
    if config_path is None:
        return {}
    if not config_path.exists():
        console.print(f"[bold red]Config file not found at {config_path}[/bold red]")
        return {}
    try:
        with config_path.open("rb") as f:
            return _normalise_keys(tomllib.load(f))
    except tomllib.TOMLDecodeError as e:
        console.print(f"[bold red]Error parsing config file {config_path}: {e}[/bold red]")
        return {}


# --- Logging ---


def setup_logging(log_level: str, log_file: str | None, *, quiet: bool) -> None:
    """Route all loggers through Rich, and optionally to a log file.

    Args:
        log_level: Logging level (debug, info, warning, error).
        log_file: Also write full log records to this file.
        quiet: Only show warnings and errors on the console.

    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,  # Don't show file:line - too verbose
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.setLevel(max(level, logging.WARNING) if quiet else level)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
        )
        file_handler.setLevel(level)
        root.addHandler(file_handler)

    root.setLevel(level)
