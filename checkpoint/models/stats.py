"""Aggregate statistics over the disk registry."""
from dataclasses import dataclass, field
from typing import Dict, List

from checkpoint.models.disk import DiskType


@dataclass(frozen=True)
class SymlinkInfo:
    source: str
    target: str


@dataclass
class DiskStats:
    """Snapshot of registry totals, link relationships and type counts."""
    total_disks: int = 0
    total_size: int = 0
    total_available: int = 0
    total_used: int = 0
    disks_by_type: Dict[DiskType, int] = field(default_factory=dict)
    hardlinks: Dict[int, List[str]] = field(default_factory=dict)  # inode -> paths
    symlinks: List[SymlinkInfo] = field(default_factory=list)

    @property
    def used_percent(self) -> float:
        """Used share of total capacity; 0 when nothing has a size."""
        if self.total_size == 0:
            return 0.0
        return self.total_used / self.total_size * 100

    def summary(self) -> str:
        """Plain-text summary suitable for logs and non-TTY output."""
        from checkpoint.ui.format import format_bytes

        lines = [
            "Storage Summary:",
            f"• Total disks: {self.total_disks}",
            f"• Total capacity: {format_bytes(self.total_size)}",
            f"• Used: {format_bytes(self.total_used)} ({self.used_percent:.1f}%)",
            f"• Available: {format_bytes(self.total_available)}",
        ]

        if self.disks_by_type:
            lines.append("")
            lines.append("Disk types:")
            for disk_type in sorted(self.disks_by_type, key=lambda t: t.value):
                lines.append(f"• {disk_type.value}: {self.disks_by_type[disk_type]}")

        if self.hardlinks:
            lines.append("")
            lines.append(f"Hard links detected: {len(self.hardlinks)} groups")

        if self.symlinks:
            lines.append(f"Symbolic links: {len(self.symlinks)}")

        return "\n".join(lines) + "\n"
