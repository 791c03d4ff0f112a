"""Shared utilities for checkpoint CLI modules."""
from __future__ import annotations

import os
from typing import Iterable, Optional

import typer
from rich.console import Console

from checkpoint.core.errors import CheckpointError, MountTableError
from checkpoint.discovery import DiskRegistry, MountTableScanner


def is_mock() -> bool:
    """Return True when CLI runs in mock mode."""
    return os.environ.get("CHECKPOINT_MOCK") == "1"


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """Set up file logging for CLI commands.

    Args:
        log_file: Path to log file (optional)
        verbose: Enable verbose logging
    """
    from checkpoint.core.config import get_config
    from checkpoint.core.logger import setup_file_logging as _setup_file_logging
    _setup_file_logging(log_file=log_file or get_config().log_file, verbose=verbose)


def create_registry(mock: Optional[bool] = None) -> DiskRegistry:
    """Return an empty DiskRegistry wired to the real or mock scanner."""
    if mock is None:
        mock = is_mock()
    return DiskRegistry(scanner=MountTableScanner(mock=mock))


def load_registry(
    console: Console,
    add_paths: Iterable[str] = (),
    mock: Optional[bool] = None,
) -> DiskRegistry:
    """Scan disks and append manual paths, reporting problems without aborting.

    Returns:
        Registry holding whatever could be collected
    """
    registry = create_registry(mock)
    try:
        registry.scan()
    except MountTableError as e:
        print_error(console, f"Error scanning disks: {e}")

    for path in add_paths:
        try:
            registry.add_manual(path)
        except CheckpointError as e:
            print_error(console, f"Error adding disk: {e}")

    return registry


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


def parse_choice(raw: str, count: int) -> Optional[int]:
    """Turn a 1-based menu choice into a 0-based index, None if invalid."""
    raw = raw.strip()
    if not raw.isdigit():
        return None
    choice = int(raw)
    if choice < 1 or choice > count:
        return None
    return choice - 1


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
    console.print(f"[red]Error:[/red] {e}")
    if verbose:
        console.print_exception()
    raise typer.Exit(exit_code)


def print_success(console: Console, message: str, prefix: str = "✓") -> None:
    """Print success message with consistent formatting.

    Args:
        console: Rich console for output
        message: Success message
        prefix: Prefix symbol (default: ✓)
    """
    console.print(f"[green]{prefix}[/green] {message}")


def print_error(console: Console, message: str, prefix: str = "✗") -> None:
    """Print error message with consistent formatting.

    Args:
        console: Rich console for output
        message: Error message
        prefix: Prefix symbol (default: ✗)
    """
    console.print(f"[red]{prefix}[/red] {message}")


def print_warning(console: Console, message: str, prefix: str = "⚠") -> None:
    """Print warning message with consistent formatting.

    Args:
        console: Rich console for output
        message: Warning message
        prefix: Prefix symbol (default: ⚠)
    """
    console.print(f"[yellow]{prefix}[/yellow] {message}")


def print_info(console: Console, message: str, prefix: str = "ℹ") -> None:
    """Print info message with consistent formatting.

    Args:
        console: Rich console for output
        message: Info message
        prefix: Prefix symbol (default: ℹ)
    """
    console.print(f"[cyan]{prefix}[/cyan] {message}")
