"""Mounted storage models."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class DiskType(Enum):
    """How a mounted location is backed."""
    PHYSICAL = "physical"
    LVM = "lvm"
    LOOP = "loop"
    BIND = "bind"
    NETWORK = "network"
    FUSE = "fuse"
    PATH = "path"
    MANUAL = "manual"
    SYMLINK = "symlink"

    @property
    def icon(self) -> str:
        """Icon shown next to the type in disk tables."""
        if self is DiskType.PHYSICAL:
            return "💽"
        if self is DiskType.LVM:
            return "🗄️"
        if self is DiskType.LOOP:
            return "🔄"
        if self is DiskType.BIND:
            return "📁"
        if self is DiskType.NETWORK:
            return "🌐"
        if self is DiskType.FUSE:
            return "🔌"
        if self is DiskType.PATH:
            return "📂"
        if self is DiskType.MANUAL:
            return "✋"
        if self is DiskType.SYMLINK:
            return "🔗"
        raise ValueError(f"Unhandled disk type: {self!r}")

    @property
    def label(self) -> str:
        return f"{self.icon} {self.value}"


@dataclass(frozen=True)
class Disk:
    """A mounted (or manually added) storage location.

    Instances are immutable; a rescan rebuilds the registry instead of
    updating disks in place.
    """
    path: str              # device or directory the record describes
    filesystem: str        # ext4, nfs4, fuse.sshfs, ...
    size: int              # bytes
    available: int         # bytes available to unprivileged users
    used: int              # bytes, includes filesystem-reserved blocks
    mount_point: str
    disk_type: DiskType
    is_symlink: bool = False
    link_target: str = ""
    inode: int = 0
    device: str = ""
    last_check: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if not 0 <= self.used <= self.size:
            raise ValueError(
                f"{self.path}: used ({self.used}) must be within 0..size ({self.size})"
            )
        if not 0 <= self.available <= self.size:
            raise ValueError(
                f"{self.path}: available ({self.available}) must be within 0..size ({self.size})"
            )

    @property
    def used_percent(self) -> float:
        if self.size == 0:
            return 0.0
        return self.used / self.size * 100


@dataclass
class UnmountedDisk:
    """Block device with a filesystem that is not mounted anywhere."""
    device: str            # /dev/sdb1
    size: str              # as reported by lsblk, e.g. "931.5G"
    type: str              # disk or part
    label: str = ""
    uuid: str = ""
    filesystem: str = ""
