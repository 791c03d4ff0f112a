"""Data models for checkpoint."""
from checkpoint.models.disk import Disk, DiskType, UnmountedDisk
from checkpoint.models.drive import DriveCategory, DriveGroup
from checkpoint.models.stats import DiskStats, SymlinkInfo

__all__ = [
    'Disk',
    'DiskType',
    'UnmountedDisk',
    'DriveCategory',
    'DriveGroup',
    'DiskStats',
    'SymlinkInfo',
]
