"""Block devices that are not mounted, and places to mount them."""
import os
import subprocess
import tempfile
from pathlib import Path
from typing import Callable, List, Optional, Set

from checkpoint.core.logger import get_logger
from checkpoint.models.disk import UnmountedDisk

logger = get_logger(__name__)

LSBLK_COMMAND = ["lsblk", "-rno", "NAME,SIZE,TYPE,LABEL,UUID,FSTYPE"]


def _run_lsblk() -> str:
    result = subprocess.run(LSBLK_COMMAND, capture_output=True, text=True, check=True)
    return result.stdout


def _mounted_devices(mount_table: str) -> Set[str]:
    """Device names from the mount table, with and without the /dev/ prefix."""
    mounted: Set[str] = set()
    try:
        lines = Path(mount_table).read_text().splitlines()
    except OSError:
        return mounted

    for line in lines:
        fields = line.split()
        if not fields:
            continue
        device = fields[0]
        mounted.add(device)
        if device.startswith("/dev/"):
            mounted.add(device[len("/dev/"):])
    return mounted


def _lsblk_field(fields: List[str], index: int) -> str:
    if index >= len(fields):
        return ""
    # raw mode escapes blanks inside values
    return fields[index].replace("\\x20", " ")


def scan_unmounted_disks(
    run_cmd: Optional[Callable[[], str]] = None,
    mount_table: Optional[str] = None,
) -> List[UnmountedDisk]:
    """List disks and partitions that carry a filesystem but are not mounted.

    A missing or failing lsblk yields an empty list.
    """
    run_cmd = run_cmd or _run_lsblk
    if mount_table is None:
        from checkpoint.core.config import get_config
        mount_table = get_config().mount_table

    try:
        output = run_cmd()
    except FileNotFoundError as e:
        logger.debug(f"lsblk unavailable: {e}")
        return []
    except subprocess.CalledProcessError as e:
        logger.warning(f"lsblk failed with exit status {e.returncode}, unmounted disks not listed")
        return []

    mounted = _mounted_devices(mount_table)
    unmounted = []

    for line in output.splitlines():
        # raw output separates columns by single spaces, empty columns stay in place
        fields = line.split(" ")
        if len(fields) < 3:
            continue

        name, size, disk_type = fields[0], fields[1], fields[2]
        if disk_type not in ("disk", "part"):
            continue

        device_path = f"/dev/{name}"
        if device_path in mounted or name in mounted:
            continue

        filesystem = _lsblk_field(fields, 5)
        if not filesystem:
            continue

        unmounted.append(UnmountedDisk(
            device=device_path,
            size=size,
            type=disk_type,
            label=_lsblk_field(fields, 3),
            uuid=_lsblk_field(fields, 4),
            filesystem=filesystem,
        ))

    return unmounted


def can_write(path: str) -> bool:
    """True if a file can be created and removed in path."""
    try:
        fd, probe = tempfile.mkstemp(prefix=".checkpoint_test_", dir=path)
    except OSError:
        return False
    os.close(fd)
    try:
        os.unlink(probe)
    except OSError:
        return False
    return True


def get_mountable_directories(home: Optional[str] = None) -> List[str]:
    """Suggest directories that could serve as mount points."""
    home = home if home is not None else os.environ.get("HOME", "")
    suggestions = []

    check_dirs = ["/mnt", "/media", "/run/media", f"{home}/mnt"]
    for base in check_dirs:
        if not os.path.isdir(base):
            continue
        try:
            names = sorted(os.listdir(base))
        except OSError:
            continue

        for name in names:
            full_path = f"{base}/{name}"
            if not os.path.isdir(full_path):
                continue
            try:
                empty = not os.listdir(full_path)
            except OSError:
                empty = True
            if empty:
                suggestions.append(full_path)

        if can_write(base):
            suggestions.append(base)

    if home:
        suggestions.append(f"{home}/Downloads")
        suggestions.append(f"{home}/Documents")

    return suggestions
