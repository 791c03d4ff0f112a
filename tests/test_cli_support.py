"""Tests for CLI support utilities."""
import io

import pytest
import typer
from rich.console import Console

from checkpoint.cli_support import (
    confirm_action,
    create_registry,
    handle_cli_error,
    is_mock,
    load_registry,
    parse_choice,
    print_error,
    print_info,
    print_success,
    print_warning,
)


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=120)


class TestIsMock:
    """Test mock mode detection."""

    def test_mock_enabled(self, monkeypatch):
        """Should return True when CHECKPOINT_MOCK=1."""
        monkeypatch.setenv("CHECKPOINT_MOCK", "1")
        assert is_mock() is True

    def test_mock_disabled(self, monkeypatch):
        monkeypatch.delenv("CHECKPOINT_MOCK", raising=False)
        assert is_mock() is False

    def test_mock_other_value(self, monkeypatch):
        monkeypatch.setenv("CHECKPOINT_MOCK", "0")
        assert is_mock() is False


class TestConfirmAction:
    """Test confirmation prompt helper."""

    def test_yes_flag_skips_prompt(self):
        assert confirm_action("Continue?", yes_flag=True) is True

    def test_mock_skips_prompt(self):
        assert confirm_action("Continue?", mock=True) is True

    def test_prompts_otherwise(self, monkeypatch):
        monkeypatch.setattr(typer, "confirm", lambda message: False)
        assert confirm_action("Continue?") is False


class TestParseChoice:
    """Test 1-based menu choice parsing."""

    @pytest.mark.parametrize("raw,expected", [
        ("1", 0),
        (" 3 ", 2),
        ("0", None),
        ("4", None),
        ("", None),
        ("two", None),
        ("-1", None),
    ])
    def test_parse(self, raw, expected):
        assert parse_choice(raw, 3) == expected


class TestRegistryLoading:
    """Test registry construction for commands."""

    def test_create_registry_is_empty(self):
        assert len(create_registry(mock=True)) == 0

    def test_load_registry_mock(self, console):
        registry = load_registry(console, mock=True)
        assert len(registry) == 5

    def test_load_registry_reports_bad_path(self, console, tmp_path):
        registry = load_registry(console, add_paths=[str(tmp_path / "missing")], mock=True)

        assert len(registry) == 5
        assert "Error adding disk" in console.file.getvalue()

    def test_load_registry_reports_unreadable_table(self, console, tmp_path, monkeypatch):
        monkeypatch.setenv("CHECKPOINT_MOUNT_TABLE", str(tmp_path / "missing"))
        registry = load_registry(console, add_paths=[str(tmp_path)], mock=False)

        assert len(registry) == 1
        assert "Error scanning disks" in console.file.getvalue()


class TestHandleCliError:
    """Test CLI error handler."""

    def test_exits_with_code(self, console):
        with pytest.raises(typer.Exit) as exc_info:
            handle_cli_error(ValueError("bad input"), console, exit_code=2)

        assert exc_info.value.exit_code == 2
        assert "Error: bad input" in console.file.getvalue()


class TestPrintHelpers:
    """Test print helper functions."""

    def test_prefixes(self, console):
        print_success(console, "done")
        print_error(console, "broken")
        print_warning(console, "careful")
        print_info(console, "note", prefix="📦")

        output = console.file.getvalue()
        assert "✓ done" in output
        assert "✗ broken" in output
        assert "⚠ careful" in output
        assert "📦 note" in output
