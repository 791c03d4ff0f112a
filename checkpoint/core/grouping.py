"""Group individual disks into user-facing drives."""
import re
from typing import Dict, List, Optional, Set

from checkpoint.models.disk import Disk, DiskType
from checkpoint.models.drive import DriveCategory, DriveGroup

GIB = 1024 * 1024 * 1024

BOOT_PREFIX = "/boot"

# Mounts under these prefixes never become data drives
TRANSIENT_PREFIXES = ("/snap", "/run", "/sys", "/proc")

_TRAILING_DIGITS = re.compile(r"\d+$")


def base_disk_name(path: str) -> str:
    """Strip the partition number, e.g. /dev/sda1 -> /dev/sda."""
    return _TRAILING_DIGITS.sub("", path)


def drive_name(disk: Disk, index: int) -> str:
    """Friendly name for a data drive, from mount point hints or device."""
    mount_point = disk.mount_point
    if "home" in mount_point:
        return "Home Drive"
    if "data" in mount_point:
        return "Data Drive"
    if "backup" in mount_point:
        return "Backup Drive"
    if "media" in mount_point:
        return "Media Drive"
    if disk.disk_type is DiskType.LVM:
        return f"Volume {index}"
    if disk.path.startswith("/dev/nvme"):
        return f"SSD Drive {index}"
    if disk.path.startswith("/dev/sd"):
        return f"Drive {index}"
    return f"Storage {index}"


def drive_icon(disk: Disk) -> str:
    if disk.path.startswith("/dev/nvme"):
        return "⚡"
    if disk.disk_type is DiskType.NETWORK:
        return "🌐"
    if disk.disk_type is DiskType.LVM:
        return "🗄️"
    return "💾"


def drive_description(disk: Disk) -> str:
    if disk.path.startswith("/dev/nvme"):
        return "NVMe SSD"
    if disk.disk_type is DiskType.LVM:
        return "Logical Volume"
    if disk.path.startswith("/dev/sd"):
        return "Hard Drive"
    return "Storage Device"


def network_drive_name(disk: Disk) -> str:
    if disk.disk_type is DiskType.NETWORK:
        parts = disk.path.split("/")
        if len(parts) > 2:
            return f"Network ({parts[2]})"
        return "Network Drive"
    return "Remote Storage"


def _system_group(disks: List[Disk], consumed: Set[int]) -> Optional[DriveGroup]:
    """Root disk plus every boot partition.

    Boot partitions add to size and used only; available stays the root
    disk's own figure.
    """
    for i, disk in enumerate(disks):
        if disk.mount_point != "/":
            continue

        group = DriveGroup(
            name="System Drive",
            icon="💻",
            category=DriveCategory.SYSTEM,
            total_size=disk.size,
            total_used=disk.used,
            available=disk.available,
            disks=[disk],
            is_primary=True,
            description="Linux System",
        )
        consumed.add(i)

        for j, other in enumerate(disks):
            if j != i and other.mount_point.startswith(BOOT_PREFIX):
                group.disks.append(other)
                group.total_size += other.size
                group.total_used += other.used
                consumed.add(j)
        return group

    return None


def _data_groups(disks: List[Disk], consumed: Set[int], min_size: int) -> List[DriveGroup]:
    members: Dict[str, List[Disk]] = {}

    for i, disk in enumerate(disks):
        if i in consumed or disk.disk_type is DiskType.LOOP:
            continue
        if disk.mount_point.startswith(TRANSIENT_PREFIXES):
            continue
        # tiny partitions such as EFI
        if disk.size < min_size:
            continue

        members.setdefault(base_disk_name(disk.path), []).append(disk)
        consumed.add(i)

    ordered = sorted(members.values(), key=lambda m: (m[0].path, m[0].mount_point))

    groups = []
    for index, group_disks in enumerate(ordered, start=1):
        first = group_disks[0]
        groups.append(DriveGroup(
            name=drive_name(first, index),
            icon=drive_icon(first),
            category=DriveCategory.DATA,
            total_size=sum(d.size for d in group_disks),
            total_used=sum(d.used for d in group_disks),
            available=sum(d.available for d in group_disks),
            disks=list(group_disks),
            is_primary=False,
            description=drive_description(first),
        ))
    return groups


def _network_groups(disks: List[Disk], consumed: Set[int]) -> List[DriveGroup]:
    groups = []
    for i, disk in enumerate(disks):
        if i in consumed:
            continue
        if disk.disk_type not in (DiskType.NETWORK, DiskType.FUSE):
            continue
        groups.append(DriveGroup(
            name=network_drive_name(disk),
            icon="🌐",
            category=DriveCategory.NETWORK,
            total_size=disk.size,
            total_used=disk.used,
            available=disk.available,
            disks=[disk],
            is_primary=False,
            description="Network Storage",
        ))
        consumed.add(i)
    return groups


def group_disks(disks: List[Disk], min_size: Optional[int] = None) -> List[DriveGroup]:
    """Group disks into drives: system first, then data, then network.

    Data drives are ordered by their first member's device path so the
    result is the same for the same input. Disks that fit no group (loop
    devices, transient mounts, partitions under min_size) are left out.

    Args:
        disks: Registry snapshot
        min_size: Smallest disk that may form a data drive (default from config)
    """
    if min_size is None:
        from checkpoint.core.config import get_config
        min_size = get_config().min_group_size

    disks = list(disks)
    consumed: Set[int] = set()

    system = _system_group(disks, consumed)
    data = _data_groups(disks, consumed, min_size)
    network = _network_groups(disks, consumed)

    groups = [system] if system is not None else []
    return groups + data + network
