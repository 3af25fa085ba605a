"""Shared utilities for optdl CLI modules."""
from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from optdl.core.config import OptdlConfig

# Default config search paths (ordered by proximity to current run)
CONFIG_PATHS = [
    "./optdl.yml",
    str(Path.home() / "optdl.yml"),
]


def find_config(config_path: Optional[str] = None) -> str:
    """Locate the active optdl resource configuration file."""
    if config_path:
        return config_path

    if env_config := os.environ.get("OPTDL_CONFIG"):
        return env_config

    for path in CONFIG_PATHS:
        if Path(path).exists():
            return path

    return "optdl.yml"


def is_mock() -> bool:
    """Return True when CLI runs against the mock host."""
    return os.environ.get("OPTDL_MOCK", "").lower() in ("1", "true")


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """Set up file logging for CLI commands.

    Args:
        log_file: Path to log file (optional)
        verbose: Enable verbose logging
    """
    if not log_file and not verbose:
        return
    from optdl.core.logger import setup_file_logging as _setup_file_logging
    _setup_file_logging(log_file=log_file, verbose=verbose)


def build_resource(mock: bool = False):
    """Create the OpticalDiskDriveLetter resource for a CLI command.

    Configuration is re-read from the environment on every command.
    """
    from optdl.core.resource import OpticalDiskDriveLetter

    config = OptdlConfig.from_env()
    if mock or is_mock():
        config = dataclasses.replace(config, mock=True)
    return OpticalDiskDriveLetter.from_config(config)


def confirm_action(message: str, yes_flag: bool = False, mock: bool = False) -> bool:
    """Prompt user for confirmation unless --yes or mock mode.

    Args:
        message: Confirmation message to display
        yes_flag: Skip prompt if True (from --yes flag)
        mock: Skip prompt if True (mock mode)

    Returns:
        True if confirmed, False otherwise
    """
    if yes_flag or mock:
        return True
    return typer.confirm(message)


def handle_cli_error(
    e: Exception,
    console: Console,
    verbose: bool = False,
    exit_code: int = 1
) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        e: Exception to handle
        console: Rich console for output
        verbose: Show exception traceback if True
        exit_code: Exit code to use
    """
    console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False, soft_wrap=True)
    if verbose:
        console.print_exception()
    raise typer.Exit(exit_code)


def print_success(console: Console, message: str, prefix: str = "✓") -> None:
    """Print success message with consistent formatting."""
    console.print(f"[green]{prefix}[/green] {message}", soft_wrap=True)


def print_error(console: Console, message: str, prefix: str = "✗") -> None:
    """Print error message with consistent formatting."""
    console.print(f"[red]{prefix}[/red] {message}", soft_wrap=True)


def print_warning(console: Console, message: str, prefix: str = "⚠") -> None:
    """Print warning message with consistent formatting."""
    console.print(f"[yellow]{prefix}[/yellow] {message}", soft_wrap=True)


def print_info(console: Console, message: str, prefix: str = "ℹ") -> None:
    """Print info message with consistent formatting."""
    console.print(f"[cyan]{prefix}[/cyan] {message}", soft_wrap=True)
