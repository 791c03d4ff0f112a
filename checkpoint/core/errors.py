"""Errors raised by disk discovery and command execution."""


class CheckpointError(Exception):
    """Base class for checkpoint errors."""
    pass


class MountTableError(CheckpointError):
    """Raised when the mount table cannot be read."""
    pass


class PathValidationError(CheckpointError):
    """Raised when a manually added path is missing or not a directory."""
    pass


class WritePermissionError(CheckpointError):
    """Raised when the target mount point is not writable."""

    def __init__(self, mount_point: str):
        super().__init__(f"no write permission for {mount_point}")
        self.mount_point = mount_point


class CommandError(CheckpointError):
    """Raised when a command cannot be started at all."""
    pass
