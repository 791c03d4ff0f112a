"""Shared test fixtures for checkpoint tests."""
import stat
from types import SimpleNamespace

import pytest

from checkpoint.core.config import set_config
from checkpoint.models.disk import Disk, DiskType

GIB = 1024 ** 3
MIB = 1024 ** 2
BLOCK = 4096


@pytest.fixture(autouse=True)
def _reset_config():
    """Every test starts from the environment-derived configuration."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def make_disk():
    """Factory for Disk records with sensible defaults."""
    def _make(path="/dev/sda1", mount_point="/mnt/data", size=10 * GIB, used=None,
              available=None, disk_type=DiskType.PHYSICAL, **kwargs):
        if used is None:
            used = size // 4
        if available is None:
            available = size - used
        return Disk(
            path=path,
            device=kwargs.pop("device", path),
            filesystem=kwargs.pop("filesystem", "ext4"),
            size=size,
            available=available,
            used=used,
            mount_point=mount_point,
            disk_type=disk_type,
            **kwargs,
        )
    return _make


def statvfs_result(blocks, bfree, bavail, frsize=BLOCK):
    return SimpleNamespace(f_blocks=blocks, f_bfree=bfree, f_bavail=bavail, f_frsize=frsize)


@pytest.fixture
def fake_statvfs():
    """Build a statvfs replacement from {mount_point: (blocks, bfree, bavail)}.

    Mount points not in the table raise OSError like an unreachable mount.
    """
    def _build(table):
        def _statvfs(path):
            if path not in table:
                raise OSError(2, "No such file or directory", path)
            return statvfs_result(*table[path])
        return _statvfs
    return _build


@pytest.fixture
def fake_lstat():
    """lstat replacement returning block-device results with given inodes."""
    def _build(inodes):
        def _lstat(path):
            if path not in inodes:
                raise OSError(2, "No such file or directory", path)
            return SimpleNamespace(st_mode=stat.S_IFBLK | 0o660, st_ino=inodes[path])
        return _lstat
    return _build


@pytest.fixture
def mount_table(tmp_path):
    """Write mount table lines to a temp file and return its path."""
    def _write(lines):
        path = tmp_path / "mounts"
        path.write_text("\n".join(lines) + "\n")
        return str(path)
    return _write
