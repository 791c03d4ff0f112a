"""Heuristic classification of mount table records."""
from typing import Optional

from checkpoint.models.disk import DiskType

NETWORK_FILESYSTEMS = frozenset({"nfs", "nfs4", "cifs", "smb"})


def classify_disk(device: str, filesystem: str, options: str) -> Optional[DiskType]:
    """Map a mount record to a disk type.

    Checks run in a fixed order and the first match wins. Returns None when
    nothing matches; such records are left out of the registry.
    """
    if "bind" in options:
        return DiskType.BIND
    if device.startswith("/dev/loop"):
        return DiskType.LOOP
    if device.startswith("/dev/mapper/"):
        return DiskType.LVM
    if device.startswith("/dev/"):
        return DiskType.PHYSICAL
    if filesystem in NETWORK_FILESYSTEMS:
        return DiskType.NETWORK
    if "fuse" in filesystem:
        return DiskType.FUSE
    if device.startswith("/"):
        return DiskType.PATH
    return None
