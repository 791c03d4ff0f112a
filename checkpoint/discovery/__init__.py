"""Disk discovery: mount table scanning, classification and the disk registry."""
from checkpoint.discovery.classifier import classify_disk
from checkpoint.discovery.mounts import MountTableScanner
from checkpoint.discovery.registry import DiskRegistry

__all__ = ['classify_disk', 'MountTableScanner', 'DiskRegistry']
