"""Registry of discovered disks."""
import os
from datetime import datetime
from typing import Callable, List, Optional

from checkpoint.core.errors import PathValidationError
from checkpoint.core.logger import get_logger
from checkpoint.discovery.mounts import MountTableScanner, capacity_from_statvfs
from checkpoint.models.disk import Disk, DiskType

logger = get_logger(__name__)


class DiskRegistry:
    """Ordered collection of disks for one scan cycle.

    A new registry is empty. scan() and add_manual() append; clear() is the
    only way to reset it.
    """

    def __init__(
        self,
        scanner: Optional[MountTableScanner] = None,
        statvfs: Callable = os.statvfs,
    ):
        self.scanner = scanner or MountTableScanner()
        self.statvfs = statvfs
        self.last_scan: Optional[datetime] = None
        self._disks: List[Disk] = []

    def scan(self) -> int:
        """Scan the mount table and append every disk found.

        Existing entries are kept; call clear() first for a fresh rescan.

        Returns:
            Number of disks appended

        Raises:
            MountTableError: If the mount table cannot be read
        """
        self.last_scan = datetime.now()
        found = self.scanner.scan()
        self._disks.extend(found)
        return len(found)

    def add_manual(self, path: str) -> Disk:
        """Register a directory by hand.

        Raises:
            PathValidationError: If the path is missing, not a directory, or
                its filesystem cannot be queried
        """
        abs_path = os.path.abspath(path)

        try:
            info = os.stat(abs_path)
        except OSError as e:
            raise PathValidationError(f"failed to stat path {abs_path}: {e}") from e

        if not os.path.isdir(abs_path):
            raise PathValidationError(f"path is not a directory: {abs_path}")

        try:
            size, available, used = capacity_from_statvfs(self.statvfs(abs_path))
        except OSError as e:
            raise PathValidationError(f"failed to get filesystem stats for {abs_path}: {e}") from e

        disk = Disk(
            path=abs_path,
            device=abs_path,
            filesystem="unknown",
            size=size,
            available=available,
            used=used,
            mount_point=abs_path,
            disk_type=DiskType.MANUAL,
            inode=info.st_ino,
            last_check=datetime.now(),
        )
        self._disks.append(disk)
        logger.info(f"Added manual path {abs_path}")
        return disk

    def clear(self) -> None:
        """Drop every disk."""
        self._disks = []

    def list(self) -> List[Disk]:
        """Disks in insertion order, as a copy of the current contents."""
        return list(self._disks)

    def __len__(self) -> int:
        return len(self._disks)
