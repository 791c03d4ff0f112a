"""Installation CLI commands - install, suggest."""
from typing import List, Optional

import typer
from rich.console import Console

from checkpoint.cli_support import confirm_action, load_registry, print_error, print_info, print_success, print_warning
from checkpoint.core.errors import CheckpointError
from checkpoint.core.executor import CommandExecutor, ExecutionResult
from checkpoint.core.package_manager import detect_package_manager, suggest_install_command
from checkpoint.models.disk import Disk

# Module-level console instance (will be set by register function)
console: Console = Console()


def find_target(disks: List[Disk], mount_point: str) -> Optional[Disk]:
    """Disk mounted exactly at mount_point, first match in registry order."""
    for disk in disks:
        if disk.mount_point == mount_point:
            return disk
    return None


def report_result(console: Console, result: ExecutionResult) -> None:
    """Print the outcome of an execution, keeping cancellation distinct from failure."""
    if result.ok:
        print_success(console, "Command executed successfully")
    elif result.cancelled:
        print_warning(console, "Command cancelled by user")
    else:
        print_error(console, f"Error executing command: {result.message}")


def install(
    command: str = typer.Argument(..., help="Installation command (split on whitespace, no shell quoting)"),
    target: Optional[str] = typer.Option(None, "--target", "-t", help="Mount point to install into"),
    add: Optional[List[str]] = typer.Option(None, "--add", "-a", help="Add a directory to the inventory first (repeatable)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation for commands that already use sudo"),
):
    """Run an installation command, optionally inside a target drive.

    Examples:
        checkpoint install "make install" --target /mnt/data
        checkpoint install "apt install htop"
    """
    target_disk = None
    if target:
        registry = load_registry(console, add or [])
        target_disk = find_target(registry.list(), target)
        if target_disk is None:
            print_error(console, f"No disk mounted at {target}")
            raise typer.Exit(1)

    def confirm(message: str) -> bool:
        return confirm_action(message, yes_flag=yes)

    # --yes never consents to the escalated retry
    executor = CommandExecutor(console=console, confirm=confirm, confirm_escalation=typer.confirm)

    try:
        result = executor.execute(command, target_disk)
    except CheckpointError as e:
        print_error(console, f"Error executing command: {e}")
        raise typer.Exit(1)

    report_result(console, result)
    if not result.ok:
        raise typer.Exit(result.returncode or 1)


def suggest(
    package: str = typer.Argument(..., help="Package to install"),
):
    """Suggest an install command for the detected package manager."""
    manager = detect_package_manager()
    if manager != "unknown":
        print_info(console, f"Detected package manager: {manager}", prefix="📦")
    console.print(suggest_install_command(package, manager=manager), markup=False)


def register_install_commands(app: typer.Typer, shared_console: Console):
    """Register installation commands with the main Typer app.

    Args:
        app: Main Typer application
        shared_console: Shared Rich console instance
    """
    global console
    console = shared_console

    app.command()(install)
    app.command()(suggest)
