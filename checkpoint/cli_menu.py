"""Interactive menu loop."""
from typing import Callable, Optional

import typer
from rich.console import Console

from checkpoint.cli_install_commands import report_result
from checkpoint.cli_support import parse_choice, print_error, print_info, print_success
from checkpoint.core.errors import CheckpointError
from checkpoint.core.executor import CommandExecutor
from checkpoint.core.grouping import group_disks
from checkpoint.core.logger import get_logger
from checkpoint.core.package_manager import detect_package_manager
from checkpoint.core.stats import compute_stats
from checkpoint.discovery import DiskRegistry
from checkpoint.discovery.unmounted import get_mountable_directories, scan_unmounted_disks
from checkpoint.ui.display import disk_table, display_drive_groups, display_summary, drive_choice_table

logger = get_logger(__name__)

MAX_SUGGESTIONS = 5


def _prompt(text: str) -> str:
    return typer.prompt(text, default="", show_default=False)


class InteractiveMenu:
    """Menu-driven session over one disk registry."""

    def __init__(
        self,
        console: Console,
        registry: DiskRegistry,
        executor: Optional[CommandExecutor] = None,
        prompt: Callable[[str], str] = _prompt,
        clear_screen: bool = True,
    ):
        self.console = console
        self.registry = registry
        self.executor = executor or CommandExecutor(console=console)
        self.prompt = prompt
        self.clear_screen = clear_screen
        self.friendly_view = True
        self.show_details = False

    def run(self) -> None:
        """Scan once, then loop until the operator exits or input ends."""
        self._scan()

        while True:
            if self.clear_screen:
                self.console.clear()
            self.render()
            self._show_menu()

            try:
                option = self.prompt("Select option").strip()
            except typer.Abort:
                break

            if option == "6":
                print_info(self.console, "Exiting...", prefix="👋")
                return

            self.handle(option)

            try:
                self.prompt("\nPress Enter to continue")
            except typer.Abort:
                break

    def render(self) -> None:
        disks = self.registry.list()
        if self.friendly_view:
            display_drive_groups(self.console, group_disks(disks))
        else:
            display_summary(self.console, compute_stats(disks), disks)
            self.console.print(disk_table(disks, show_details=self.show_details))

    def handle(self, option: str) -> None:
        if option == "1":
            self.add_disk()
        elif option == "2":
            self.install()
        elif option == "3":
            self.rescan()
        elif option == "4":
            if self.friendly_view:
                self.friendly_view = False
                print_info(self.console, "Switched to technical view", prefix="📊")
            else:
                self.show_details = not self.show_details
                print_info(self.console, f"Detail view: {self.show_details}", prefix="📊")
        elif option == "5":
            self.friendly_view = not self.friendly_view
            print_info(self.console, f"Friendly view: {self.friendly_view}", prefix="🖥️")
        else:
            print_error(self.console, "Invalid option")

    def _show_menu(self) -> None:
        toggle = "Switch to technical view" if self.friendly_view else "Toggle detailed view"
        self.console.print("\n[orange1]Options:[/orange1]")
        self.console.print("[green]1.[/green] Add a disk path manually")
        self.console.print("[green]2.[/green] Execute installation command")
        self.console.print("[green]3.[/green] Rescan disks")
        self.console.print(f"[green]4.[/green] {toggle}")
        self.console.print("[green]5.[/green] Toggle view mode (friendly/technical)")
        self.console.print("[green]6.[/green] Exit")

    def _scan(self) -> None:
        try:
            self.registry.scan()
        except CheckpointError as e:
            print_error(self.console, f"Error scanning disks: {e}")

    def add_disk(self) -> None:
        self.console.print("\n[orange1]📁 Add Disk Path[/orange1]")

        unmounted = scan_unmounted_disks()
        if unmounted:
            self.console.print("\n[orange1]💿 Unmounted disks detected:[/orange1]")
            for i, disk in enumerate(unmounted, start=1):
                self.console.print(f"[green]{i}.[/green] {disk.device} ({disk.size}, {disk.filesystem})")
                if disk.label:
                    self.console.print(f"   Label: {disk.label}")
            print_info(self.console, "These disks need to be mounted first to be used")

        suggestions = get_mountable_directories()
        if suggestions:
            self.console.print("\n[orange1]📂 Suggested directories:[/orange1]")
            for path in suggestions[:MAX_SUGGESTIONS]:
                self.console.print(f"  • {path}")

        path = self.prompt("\n📁 Enter disk path (or press Enter to cancel)").strip()
        if not path:
            print_info(self.console, "Cancelled - no disk added", prefix="❌")
            return

        try:
            self.registry.add_manual(path)
        except CheckpointError as e:
            print_error(self.console, f"Error adding disk: {e}")
            return
        print_success(self.console, "Disk added successfully")

    def install(self) -> None:
        manager = detect_package_manager()
        if manager != "unknown":
            print_info(self.console, f"Detected package manager: {manager}", prefix="📦")

        command = self.prompt("💻 Enter installation command").strip()
        if not command:
            print_error(self.console, "Empty command")
            return

        if self.friendly_view:
            groups = group_disks(self.registry.list())
            self.console.print("\n[orange1]🎯 Select target drive:[/orange1]")
            self.console.print(drive_choice_table(groups))
            raw = self.prompt("Select drive (or press Enter for default)")
            index = parse_choice(raw, len(groups))
            target = groups[index].target if index is not None else None
        else:
            disks = self.registry.list()
            raw = self.prompt("🎯 Select target disk ID (or press Enter for default)").strip()
            target = None
            if raw:
                index = parse_choice(raw, len(disks))
                if index is None:
                    print_error(self.console, "Invalid disk ID")
                    return
                target = disks[index]

        try:
            result = self.executor.execute(command, target)
        except CheckpointError as e:
            print_error(self.console, f"Error executing command: {e}")
            return
        report_result(self.console, result)

    def rescan(self) -> None:
        print_info(self.console, "Rescanning disks...", prefix="🔄")
        self.registry.clear()
        try:
            self.registry.scan()
        except CheckpointError as e:
            print_error(self.console, f"Error rescanning disks: {e}")
            return
        print_success(self.console, "Rescan completed")
