"""Aggregate statistics over registered disks."""
from typing import Dict, Iterable, List

from checkpoint.models.disk import Disk, DiskType
from checkpoint.models.stats import DiskStats, SymlinkInfo


def compute_stats(disks: Iterable[Disk]) -> DiskStats:
    """Totals, per-type counts, hardlink groups and symlinks in one pass.

    Symlink entries are counted by type but excluded from capacity totals
    and hardlink detection. Hardlink groups are inodes shared by two or
    more disks, in order of first appearance.
    """
    stats = DiskStats()
    by_inode: Dict[int, List[str]] = {}

    for disk in disks:
        stats.total_disks += 1
        stats.disks_by_type[disk.disk_type] = stats.disks_by_type.get(disk.disk_type, 0) + 1

        if disk.disk_type is not DiskType.SYMLINK:
            stats.total_size += disk.size
            stats.total_available += disk.available
            stats.total_used += disk.used

            if disk.inode > 0:
                by_inode.setdefault(disk.inode, []).append(disk.path)

        if disk.is_symlink and disk.link_target:
            stats.symlinks.append(SymlinkInfo(source=disk.path, target=disk.link_target))

    stats.hardlinks = {inode: paths for inode, paths in by_inode.items() if len(paths) > 1}
    return stats


def hardlinked_inodes(disks: Iterable[Disk]) -> set:
    """Inodes that belong to a hardlink group."""
    return set(compute_stats(disks).hardlinks)
