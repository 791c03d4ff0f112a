"""Mount table scanner."""
import os
import stat
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from checkpoint.core.errors import MountTableError
from checkpoint.core.logger import get_logger
from checkpoint.discovery.classifier import classify_disk
from checkpoint.models.disk import Disk, DiskType

logger = get_logger(__name__)

# Filesystems that are not backed by storage
VIRTUAL_FILESYSTEMS = frozenset({
    "tmpfs",
    "devtmpfs",
    "sysfs",
    "proc",
    "cgroup",
    "cgroup2",
    "debugfs",
    "securityfs",
    "pstore",
    "efivarfs",
    "bpf",
    "tracefs",
    "hugetlbfs",
    "mqueue",
    "configfs",
    "ramfs",
    "autofs",
    "fusectl",
})


@dataclass(frozen=True)
class MountEntry:
    """One usable line of the mount table."""
    device: str
    mount_point: str
    filesystem: str
    options: str


def _unescape(field: str) -> str:
    """Decode the octal escapes the kernel uses for spaces and tabs."""
    return (
        field.replace("\\040", " ")
        .replace("\\011", "\t")
        .replace("\\012", "\n")
        .replace("\\134", "\\")
    )


def parse_mount_table(lines: Iterable[str]) -> Iterator[MountEntry]:
    """Yield storage-backed mount entries.

    The first line seen for a mount point wins, even when that line is a
    virtual filesystem and therefore skipped.
    """
    seen_mounts = set()

    for line in lines:
        fields = line.split()
        if len(fields) < 4:
            continue

        device, mount_point, filesystem, options = (_unescape(f) for f in fields[:4])

        if mount_point in seen_mounts:
            continue
        seen_mounts.add(mount_point)

        if filesystem in VIRTUAL_FILESYSTEMS:
            continue

        yield MountEntry(device, mount_point, filesystem, options)


def capacity_from_statvfs(st) -> Tuple[int, int, int]:
    """Return (size, available, used) in bytes from a statvfs result.

    Used is derived from free blocks, not available blocks, so it includes
    the filesystem's reserved space and size != used + available.
    """
    size = st.f_blocks * st.f_frsize
    available = st.f_bavail * st.f_frsize
    used = (st.f_blocks - st.f_bfree) * st.f_frsize
    return size, available, used


class MountTableScanner:
    """Build Disk records from the kernel mount table."""

    def __init__(
        self,
        mount_table: Optional[str] = None,
        mock: bool = False,
        statvfs: Callable = os.statvfs,
        lstat: Callable = os.lstat,
        stat_path: Callable = os.stat,
        classify: Callable[[str, str, str], Optional[DiskType]] = classify_disk,
    ):
        if mount_table is None:
            from checkpoint.core.config import get_config
            mount_table = get_config().mount_table
        self.mount_table = Path(mount_table)
        self.mock = mock
        self.statvfs = statvfs
        self.lstat = lstat
        self.stat_path = stat_path
        self.classify = classify

    def scan(self) -> List[Disk]:
        """Scan the mount table and return every classifiable, measurable disk.

        Raises:
            MountTableError: If the mount table cannot be read
        """
        if self.mock:
            return self._mock_disks()

        try:
            lines = self.mount_table.read_text().splitlines()
        except OSError as e:
            raise MountTableError(f"failed to read {self.mount_table}: {e}") from e

        return self.scan_lines(lines)

    def scan_lines(self, lines: Iterable[str]) -> List[Disk]:
        """Build disks from already-read mount table lines."""
        disks = []
        for entry in parse_mount_table(lines):
            disk = self.analyze(entry)
            if disk is not None:
                disks.append(disk)

        logger.info(f"Mount table scan found {len(disks)} disk(s)")
        return disks

    def analyze(self, entry: MountEntry) -> Optional[Disk]:
        """Turn one mount entry into a Disk, or None if it is excluded."""
        disk_type = self.classify(entry.device, entry.filesystem, entry.options)
        if disk_type is None:
            logger.debug(f"Unclassified mount skipped: {entry.device} on {entry.mount_point}")
            return None

        try:
            size, available, used = capacity_from_statvfs(self.statvfs(entry.mount_point))
        except OSError as e:
            logger.debug(f"Capacity query failed for {entry.mount_point}: {e}")
            return None

        is_symlink, link_target, inode = self._link_info(entry.device)
        if inode == 0:
            inode = self._inode_of(entry.mount_point)

        try:
            return Disk(
                path=entry.device,
                device=entry.device,
                filesystem=entry.filesystem,
                size=size,
                available=available,
                used=used,
                mount_point=entry.mount_point,
                disk_type=disk_type,
                is_symlink=is_symlink,
                link_target=link_target,
                inode=inode,
                last_check=datetime.now(),
            )
        except ValueError as e:
            logger.debug(f"Inconsistent capacity for {entry.mount_point}: {e}")
            return None

    def _link_info(self, device: str) -> Tuple[bool, str, int]:
        """Return (is_symlink, resolved target, inode) for a device path."""
        try:
            info = self.lstat(device)
        except OSError:
            return False, "", 0

        if not stat.S_ISLNK(info.st_mode):
            return False, "", info.st_ino

        try:
            target = os.path.realpath(device, strict=True)
        except OSError:
            target = ""
        return True, target, info.st_ino

    def _inode_of(self, path: str) -> int:
        try:
            return self.stat_path(path).st_ino
        except OSError:
            return 0

    def _mock_disks(self) -> List[Disk]:
        """Mock disk data for testing."""
        gib = 1024 ** 3
        return [
            Disk(
                path="/dev/nvme0n1p2",
                device="/dev/nvme0n1p2",
                filesystem="ext4",
                size=476 * gib,
                available=301 * gib,
                used=151 * gib,
                mount_point="/",
                disk_type=DiskType.PHYSICAL,
                inode=412,
            ),
            Disk(
                path="/dev/nvme0n1p1",
                device="/dev/nvme0n1p1",
                filesystem="vfat",
                size=512 * 1024 ** 2,
                available=500 * 1024 ** 2,
                used=12 * 1024 ** 2,
                mount_point="/boot/efi",
                disk_type=DiskType.PHYSICAL,
                inode=411,
            ),
            Disk(
                path="/dev/sda1",
                device="/dev/sda1",
                filesystem="ext4",
                size=1863 * gib,
                available=1200 * gib,
                used=570 * gib,
                mount_point="/mnt/data",
                disk_type=DiskType.PHYSICAL,
                inode=389,
            ),
            Disk(
                path="/dev/sda2",
                device="/dev/sda2",
                filesystem="ext4",
                size=931 * gib,
                available=800 * gib,
                used=84 * gib,
                mount_point="/mnt/backup",
                disk_type=DiskType.PHYSICAL,
                inode=390,
            ),
            Disk(
                path="//nas/media",
                device="//nas/media",
                filesystem="cifs",
                size=7450 * gib,
                available=3100 * gib,
                used=4350 * gib,
                mount_point="/mnt/nas",
                disk_type=DiskType.NETWORK,
                inode=2,
            ),
        ]
