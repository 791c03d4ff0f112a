"""Logical drive models built from individual disks."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from checkpoint.models.disk import Disk


class DriveCategory(Enum):
    """Presentation category of a drive group."""
    SYSTEM = "system"
    DATA = "data"
    NETWORK = "network"


@dataclass
class DriveGroup:
    """One or more disks presented as a single drive."""
    name: str
    icon: str
    category: DriveCategory
    total_size: int = 0
    total_used: int = 0
    available: int = 0
    disks: List[Disk] = field(default_factory=list)
    is_primary: bool = False
    description: str = ""

    @property
    def used_percent(self) -> float:
        """Share of the group's size in use (0 for an empty group)."""
        if self.total_size == 0:
            return 0.0
        return self.total_used / self.total_size * 100

    @property
    def target(self) -> Disk:
        """Disk used when the group is picked as an install target."""
        return self.disks[0]

    @property
    def mount_points(self) -> List[str]:
        return [disk.mount_point for disk in self.disks]
