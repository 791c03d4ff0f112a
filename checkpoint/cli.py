#!/usr/bin/env python3
"""checkpoint CLI - inventory mounted storage and install onto a chosen drive."""
from typing import Optional

import typer
from rich.console import Console

from checkpoint.cli_disk_commands import register_disk_commands
from checkpoint.cli_install_commands import register_install_commands
from checkpoint.cli_support import create_registry, setup_file_logging
from checkpoint.core.config import get_config
from checkpoint.core.logger import get_logger

app = typer.Typer(
    name="checkpoint",
    help="""checkpoint - see your drives, install onto the one you choose

Run without a command for the interactive menu.

Quick start:
  checkpoint drives                               # Drives at a glance
  checkpoint disks --details                      # Every mount, with inodes
  checkpoint install "make install" -t /mnt/data  # Install into a drive
""",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug-level file logging"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Log file path"),
):
    """Start the interactive menu unless a command is given."""
    if verbose or log_file or get_config().log_file:
        setup_file_logging(log_file=log_file, verbose=verbose)
    if ctx.invoked_subcommand:
        return
    menu()


@app.command()
def menu():
    """Interactive menu: add paths, install, rescan, switch views."""
    from checkpoint.cli_menu import InteractiveMenu

    InteractiveMenu(console, create_registry()).run()


register_disk_commands(app, console)
register_install_commands(app, console)

if __name__ == "__main__":
    app()
