"""checkpoint runtime configuration and settings."""
import os
from dataclasses import dataclass
from typing import Optional

GIB = 1024 * 1024 * 1024


@dataclass
class CheckpointConfig:
    """Runtime configuration for checkpoint.

    Attributes:
        mount_table: Mount table to scan (default: /proc/mounts)
        min_group_size: Disks smaller than this never become data drive groups (default: 1 GiB)
        escalation_command: Keyword used to retry commands with elevated privileges (default: sudo)
        log_file: Log file path, None for the default location
    """

    mount_table: str = "/proc/mounts"
    min_group_size: int = GIB
    escalation_command: str = "sudo"
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "CheckpointConfig":
        """Create config from environment variables.

        Environment variables:
            CHECKPOINT_MOUNT_TABLE: Mount table path
            CHECKPOINT_MIN_GROUP_SIZE: Minimum data drive size in bytes
            CHECKPOINT_ESCALATION_COMMAND: Privilege escalation keyword
            CHECKPOINT_LOG_FILE: Log file path

        Returns:
            CheckpointConfig instance with values from environment or defaults
        """
        return cls(
            mount_table=os.getenv("CHECKPOINT_MOUNT_TABLE", cls.mount_table),
            min_group_size=int(
                os.getenv("CHECKPOINT_MIN_GROUP_SIZE", cls.min_group_size)
            ),
            escalation_command=os.getenv(
                "CHECKPOINT_ESCALATION_COMMAND", cls.escalation_command
            ),
            log_file=os.getenv("CHECKPOINT_LOG_FILE") or None,
        )


# Global config instance (can be overridden)
_config: Optional[CheckpointConfig] = None


def get_config() -> CheckpointConfig:
    """Get the global checkpoint configuration.

    Returns:
        CheckpointConfig instance (creates from environment if not set)
    """
    global _config
    if _config is None:
        _config = CheckpointConfig.from_env()
    return _config


def set_config(config: Optional[CheckpointConfig]):
    """Set the global checkpoint configuration.

    Args:
        config: CheckpointConfig instance to use globally, None to reload from environment
    """
    global _config
    _config = config
