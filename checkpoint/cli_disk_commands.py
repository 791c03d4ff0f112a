"""Disk inventory CLI commands - drives, disks, summary, export, unmounted."""
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
import yaml
from rich.console import Console
from rich.table import Table

from checkpoint.cli_support import handle_cli_error, load_registry, print_info, print_success, print_warning
from checkpoint.core.grouping import group_disks
from checkpoint.core.stats import compute_stats
from checkpoint.discovery.unmounted import get_mountable_directories, scan_unmounted_disks
from checkpoint.models.disk import Disk
from checkpoint.models.drive import DriveGroup
from checkpoint.models.stats import DiskStats
from checkpoint.ui.display import disk_table, display_drive_groups, display_summary

# Module-level console instance (will be set by register function)
console: Console = Console()

ADD_OPTION_HELP = "Add a directory to the inventory before showing it (repeatable)"


def disk_payload(disk: Disk) -> Dict[str, Any]:
    return {
        "path": disk.path,
        "device": disk.device,
        "filesystem": disk.filesystem,
        "type": disk.disk_type.value,
        "mount_point": disk.mount_point,
        "size": disk.size,
        "used": disk.used,
        "available": disk.available,
        "inode": disk.inode,
        "is_symlink": disk.is_symlink,
        "link_target": disk.link_target,
        "last_check": disk.last_check.isoformat(timespec="seconds"),
    }


def group_payload(group: DriveGroup) -> Dict[str, Any]:
    return {
        "name": group.name,
        "category": group.category.value,
        "description": group.description,
        "primary": group.is_primary,
        "total_size": group.total_size,
        "total_used": group.total_used,
        "available": group.available,
        "mount_points": group.mount_points,
    }


def stats_payload(stats: DiskStats) -> Dict[str, Any]:
    return {
        "total_disks": stats.total_disks,
        "total_size": stats.total_size,
        "total_used": stats.total_used,
        "total_available": stats.total_available,
        "used_percent": round(stats.used_percent, 1),
        "by_type": {t.value: n for t, n in sorted(stats.disks_by_type.items(), key=lambda i: i[0].value)},
        "hardlinks": {str(inode): paths for inode, paths in stats.hardlinks.items()},
        "symlinks": [{"source": s.source, "target": s.target} for s in stats.symlinks],
    }


def drives(
    add: Optional[List[str]] = typer.Option(None, "--add", "-a", help=ADD_OPTION_HELP),
):
    """Show disks grouped into drives (friendly view)."""
    registry = load_registry(console, add or [])
    display_drive_groups(console, group_disks(registry.list()))


def disks(
    details: bool = typer.Option(False, "--details", "-d", help="Show filesystem, used space, inodes and links"),
    add: Optional[List[str]] = typer.Option(None, "--add", "-a", help=ADD_OPTION_HELP),
):
    """List every discovered disk (technical view)."""
    registry = load_registry(console, add or [])
    console.print(disk_table(registry.list(), show_details=details))


def summary(
    add: Optional[List[str]] = typer.Option(None, "--add", "-a", help=ADD_OPTION_HELP),
    plain: bool = typer.Option(False, "--plain", help="Print a plain-text summary"),
):
    """Show capacity totals, disk types and link statistics."""
    registry = load_registry(console, add or [])
    stats = compute_stats(registry.list())
    if plain:
        console.print(stats.summary(), markup=False, highlight=False, soft_wrap=True)
        return
    display_summary(console, stats, registry.list())


def export(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the inventory to a file"),
    output_format: str = typer.Option("yaml", "--format", "-f", help="Output format: yaml or json"),
    add: Optional[List[str]] = typer.Option(None, "--add", "-a", help=ADD_OPTION_HELP),
):
    """Export disks, drive groups and statistics as YAML or JSON."""
    if output_format not in ("yaml", "json"):
        handle_cli_error(ValueError(f"Unknown format '{output_format}' (use yaml or json)"), console)

    registry = load_registry(console, add or [])
    snapshot = registry.list()
    result = {
        "disks": [disk_payload(d) for d in snapshot],
        "drives": [group_payload(g) for g in group_disks(snapshot)],
        "stats": stats_payload(compute_stats(snapshot)),
    }

    if output_format == "json":
        rendered = json.dumps(result, indent=2, ensure_ascii=False)
    else:
        rendered = yaml.safe_dump(result, sort_keys=False, allow_unicode=True)

    if output:
        output.write_text(rendered)
        print_success(console, f"Wrote inventory to {output}", prefix="💾")
    else:
        console.print(rendered, markup=False, highlight=False, soft_wrap=True)


def unmounted():
    """List disks with a filesystem that are not mounted, and suggested mount points."""
    found = scan_unmounted_disks()
    if found:
        table = Table(title="💿 Unmounted disks", show_header=True, header_style="bold cyan")
        table.add_column("Device", style="cyan")
        table.add_column("Size")
        table.add_column("Filesystem")
        table.add_column("Label")
        table.add_column("UUID", style="dim")
        for disk in found:
            table.add_row(disk.device, disk.size, disk.filesystem, disk.label, disk.uuid)
        console.print(table)
        print_info(console, "These disks need to be mounted first to be used")
    else:
        print_warning(console, "No unmounted disks found")

    suggestions = get_mountable_directories()
    if suggestions:
        console.print("\n[cyan]📂 Suggested directories:[/cyan]")
        for path in suggestions:
            console.print(f"  • {path}")


def register_disk_commands(app: typer.Typer, shared_console: Console):
    """Register disk inventory commands with the main Typer app.

    Args:
        app: Main Typer application
        shared_console: Shared Rich console instance
    """
    global console
    console = shared_console

    app.command()(drives)
    app.command()(disks)
    app.command()(summary)
    app.command()(export)
    app.command()(unmounted)
