"""checkpoint - mounted storage inventory and targeted command execution."""

__version__ = "0.1.0"
