"""Grouping, statistics and command execution."""
