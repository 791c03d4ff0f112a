"""Rich views: friendly drive panels, disk tables and the storage summary."""
from typing import List

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from checkpoint.core.stats import hardlinked_inodes
from checkpoint.models.disk import Disk, DiskType
from checkpoint.models.drive import DriveGroup
from checkpoint.models.stats import DiskStats
from checkpoint.ui.format import format_bytes, truncate_path, usage_bar

MAIN_STORAGE_LIMIT = 5


def display_drive_groups(console: Console, groups: List[DriveGroup]) -> None:
    """One panel per drive, the way a file manager shows 'My Computer'."""
    console.print("\n[bold cyan]💾 My Computer[/bold cyan]\n")
    if not groups:
        console.print("[yellow]No drives found[/yellow]")
        return

    for group in groups:
        console.print(Panel(_drive_content(group), width=64, border_style="grey50"))


def _drive_content(group: DriveGroup) -> str:
    lines = [
        f"[orange1]{group.icon}[/orange1] [bold cyan]{group.name}[/bold cyan] "
        f"[italic grey62]({group.description})[/italic grey62]",
        "",
        f"📊 Space: [green]{format_bytes(group.available)}[/green] free of "
        f"[cyan]{format_bytes(group.total_size)}[/cyan]",
        "",
        f"{usage_bar(group.used_percent)} {group.used_percent:.1f}%",
        "",
    ]

    if len(group.disks) == 1:
        lines.append(f"📁 Location: {group.disks[0].mount_point}")
    else:
        lines.append("📁 Locations:")
        for disk in group.disks:
            lines.append(f"   • {disk.mount_point} ({format_bytes(disk.size)})")

    if group.is_primary:
        lines.append("")
        lines.append("[green]⭐ Primary Drive[/green]")

    return "\n".join(lines)


def drive_choice_table(groups: List[DriveGroup]) -> Table:
    """Numbered drive list used when picking an install target."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", justify="right")
    table.add_column("Drive")
    table.add_column("Free", style="green")
    table.add_column("Used", style="red")
    table.add_column("Type", style="dim")

    for i, group in enumerate(groups, start=1):
        table.add_row(
            str(i),
            f"{group.icon} {group.name}",
            format_bytes(group.available),
            f"{group.used_percent:.1f}%",
            group.description,
        )
    return table


def disk_table(disks: List[Disk], show_details: bool = False) -> Table:
    """Technical disk listing.

    The simple view hides symlink entries and numbers the remaining disks
    consecutively; the detailed view lists everything with filesystem,
    used space, inode and link markers.
    """
    table = Table(title="💾 Storage Disks Overview", show_header=True, header_style="bold cyan")
    table.add_column("ID", justify="right")
    table.add_column("Device")
    table.add_column("Type", style="orange1")
    if show_details:
        table.add_column("FS")
    table.add_column("Size", style="cyan")
    if show_details:
        table.add_column("Used", style="red")
    table.add_column("Available", style="green")
    if show_details:
        table.add_column("Inode", style="dim")
    table.add_column("Mount")

    if not show_details:
        shown = [d for d in disks if d.disk_type is not DiskType.SYMLINK]
        for i, disk in enumerate(shown, start=1):
            table.add_row(
                str(i),
                truncate_path(disk.path, 30),
                disk.disk_type.value,
                format_bytes(disk.size),
                format_bytes(disk.available),
                truncate_path(disk.mount_point, 40),
            )
        return table

    linked = hardlinked_inodes(disks)
    for i, disk in enumerate(disks, start=1):
        device = truncate_path(disk.path, 40)
        if disk.is_symlink and disk.link_target:
            device = (
                f"[italic sky_blue1]{truncate_path(disk.path, 20)} → "
                f"{truncate_path(disk.link_target, 20)}[/italic sky_blue1]"
            )

        type_label = disk.disk_type.label
        if disk.is_symlink:
            type_label = "✨ " + type_label
        if disk.inode in linked and disk.disk_type is not DiskType.SYMLINK:
            type_label = f"[magenta]🔗 {type_label}[/magenta]"

        table.add_row(
            str(i),
            device,
            type_label,
            disk.filesystem,
            format_bytes(disk.size),
            format_bytes(disk.used),
            format_bytes(disk.available),
            str(disk.inode) if disk.inode > 0 else "-",
            truncate_path(disk.mount_point, 30),
        )
    return table


def display_summary(console: Console, stats: DiskStats, disks: List[Disk]) -> None:
    """Storage summary panel: totals, type breakdown, main disks, links."""
    lines = [
        f"Total Disks: [bold cyan]{stats.total_disks}[/bold cyan]",
        f"Total Capacity: [bold cyan]{format_bytes(stats.total_size)}[/bold cyan]",
        f"Used Space: [bold cyan]{format_bytes(stats.total_used)} ({stats.used_percent:.1f}%)[/bold cyan]",
        f"Available: [bold cyan]{format_bytes(stats.total_available)}[/bold cyan]",
    ]

    types = [t for t in sorted(stats.disks_by_type, key=lambda t: t.value) if t is not DiskType.SYMLINK]
    if types:
        lines.append("")
        lines.append("Disk Types:")
        for disk_type in types:
            lines.append(f"  {disk_type.label}: [bold cyan]{stats.disks_by_type[disk_type]}[/bold cyan]")

    main = [d for d in disks if d.disk_type in (DiskType.PHYSICAL, DiskType.LVM)]
    lines.append("")
    lines.append("Main Storage:")
    for disk in main[:MAIN_STORAGE_LIMIT]:
        lines.append(
            f"  {truncate_path(disk.path, 20)}: {format_bytes(disk.size)} "
            f"({format_bytes(disk.available)} free, {disk.used_percent:.0f}% used)"
        )
    if len(main) > MAIN_STORAGE_LIMIT:
        lines.append(f"  ... and {len(main) - MAIN_STORAGE_LIMIT} more")

    if stats.hardlinks or stats.symlinks:
        lines.append("")
        lines.append("Links:")
        if stats.hardlinks:
            lines.append(f"  🔗 Hard link groups: [bold cyan]{len(stats.hardlinks)}[/bold cyan]")
        if stats.symlinks:
            lines.append(f"  ✨ Symbolic links: [bold cyan]{len(stats.symlinks)}[/bold cyan]")

    console.print(Panel(
        "\n".join(lines),
        title="📊 Storage Summary",
        border_style="cyan",
        padding=(1, 2),
    ))
