"""Terminal rendering of disks, drives and statistics."""
