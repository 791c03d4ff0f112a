"""Run installation commands against a target disk.

Commands are split on whitespace and started without a shell, with the
terminal handed straight to the child. A failure that looks like a
permission problem can be retried with the escalation command after the
operator agrees.
"""
import os
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional

from rich.console import Console

from checkpoint.core.errors import CommandError, WritePermissionError
from checkpoint.core.logger import get_logger
from checkpoint.discovery.unmounted import can_write
from checkpoint.models.disk import Disk

logger = get_logger(__name__)

# dpkg/apt exit with 100 when they cannot lock or write their database
PERMISSION_EXIT_CODE = 100

# Exit codes 1 and 2 only count as permission failures for these tools
PERMISSION_AMBIGUOUS_EXIT_CODES = (1, 2)
PACKAGE_MANAGER_TOOLS = ("apt", "dpkg", "yum", "dnf", "pacman", "zypper")

COMMAND_NOT_FOUND = 127
COMMAND_NOT_EXECUTABLE = 126


class ExecutionState(Enum):
    """States a single command invocation moves through."""
    IDLE = "idle"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
    PERMISSION_SUSPECTED = "permission-suspected"
    PROMPT_USER = "prompt-user"
    RETRY_ESCALATED = "retry-escalated"
    CANCELLED = "cancelled"


TERMINAL_STATES = (ExecutionState.SUCCESS, ExecutionState.FAILED, ExecutionState.CANCELLED)


@dataclass
class ExecutionResult:
    """Outcome of one execute() call."""
    command: str
    state: ExecutionState
    returncode: Optional[int] = None
    escalated: bool = False
    message: str = ""
    history: List[ExecutionState] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state is ExecutionState.SUCCESS

    @property
    def cancelled(self) -> bool:
        return self.state is ExecutionState.CANCELLED


def tokenize(command: str) -> List[str]:
    """Split a command on whitespace. Quoting is not interpreted."""
    return command.split()


def is_permission_failure(command: str, returncode: int) -> bool:
    """Guess whether a non-zero exit was caused by missing privileges."""
    if returncode == PERMISSION_EXIT_CODE:
        return True
    if returncode in PERMISSION_AMBIGUOUS_EXIT_CODES:
        return any(tool in command for tool in PACKAGE_MANAGER_TOOLS)
    return False


def install_environment(mount_point: str, base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Inherited environment plus the conventional install-target variables."""
    env = dict(os.environ if base is None else base)
    env["PREFIX"] = mount_point
    env["DESTDIR"] = mount_point
    env["INSTALL_ROOT"] = mount_point
    return env


def run_interactive(argv: List[str], cwd: Optional[str] = None, env: Optional[Dict[str, str]] = None) -> int:
    """Run argv attached to the current terminal and return its exit code."""
    return subprocess.run(argv, cwd=cwd, env=env).returncode


class CommandExecutor:
    """Execute one command at a time, with an escalation retry on permission failures."""

    def __init__(
        self,
        console: Optional[Console] = None,
        runner: Callable[..., int] = run_interactive,
        confirm: Optional[Callable[[str], bool]] = None,
        confirm_escalation: Optional[Callable[[str], bool]] = None,
        probe: Callable[[str], bool] = can_write,
        escalation_command: Optional[str] = None,
    ):
        if escalation_command is None:
            from checkpoint.core.config import get_config
            escalation_command = get_config().escalation_command
        if confirm is None:
            import typer
            confirm = typer.confirm

        self.console = console or Console()
        self.runner = runner
        self.confirm = confirm
        self.confirm_escalation = confirm_escalation or confirm
        self.probe = probe
        self.escalation_command = escalation_command
        self.state = ExecutionState.IDLE
        self._history: List[ExecutionState] = []

    def execute(self, command: str, target: Optional[Disk] = None) -> ExecutionResult:
        """Run command, optionally inside target's mount point.

        Raises:
            CommandError: If the command is empty
            WritePermissionError: If target's mount point is not writable;
                nothing is run in that case
        """
        self.state = ExecutionState.IDLE
        self._history = [ExecutionState.IDLE]

        argv = tokenize(command)
        if not argv:
            raise CommandError("empty command")

        if self.escalation_command in command:
            self.console.print(
                f"\n[yellow]⚠[/yellow]  Command contains '{self.escalation_command}'. "
                "Consider running without elevated privileges."
            )
            if not self.confirm("Run it anyway?"):
                return self._finish(command, ExecutionState.CANCELLED, message="command cancelled by user")

        cwd = None
        env = None
        if target is not None:
            if not self.probe(target.mount_point):
                logger.info(f"No write permission for {target.mount_point}")
                raise WritePermissionError(target.mount_point)
            cwd = target.mount_point
            env = install_environment(target.mount_point)

        self.console.print(f"\n🚀 Executing: [bold]{command}[/bold]")
        if target is not None:
            self.console.print(f"📍 Target location: {target.mount_point}")

        self._transition(ExecutionState.RUNNING)
        returncode, message = self._run(argv, cwd=cwd, env=env)

        if returncode == 0:
            return self._finish(command, ExecutionState.SUCCESS, returncode)

        if not is_permission_failure(command, returncode):
            return self._finish(command, ExecutionState.FAILED, returncode, message=message)

        self._transition(ExecutionState.PERMISSION_SUSPECTED)
        return self._prompt_escalation(command, target)

    def _prompt_escalation(self, command: str, target: Optional[Disk]) -> ExecutionResult:
        self._transition(ExecutionState.PROMPT_USER)
        keyword = self.escalation_command

        self.console.print("\n[yellow]⚠[/yellow]  The command failed, likely due to missing permissions.")
        self.console.print("\n[red bold]🔒 SECURITY WARNING:[/red bold]")
        self.console.print(f"   Running commands with {keyword} gives them full system access.")
        self.console.print("   Only proceed if you trust this command and understand the risks.")

        if not self.confirm_escalation(f"Retry with {keyword}?"):
            logger.info(f"Escalation declined for: {command}")
            return self._finish(command, ExecutionState.CANCELLED, message="command cancelled by user")

        self._transition(ExecutionState.RETRY_ESCALATED)
        argv = tokenize(command)
        if argv[0] != keyword:
            argv = [keyword] + argv
        escalated = " ".join(argv)

        self.console.print(f"\n🚀 Executing with {keyword}: [bold]{escalated}[/bold]")
        if target is not None:
            # working directory and install variables are not reapplied
            self.console.print(
                f"[yellow]⚠[/yellow]  Note: target disk settings ({target.mount_point}) "
                f"may not apply with {keyword}"
            )
            logger.warning(f"Escalated run drops target settings for {target.mount_point}")

        returncode, message = self._run(argv)
        state = ExecutionState.SUCCESS if returncode == 0 else ExecutionState.FAILED
        return self._finish(escalated, state, returncode, escalated=True, message=message)

    def _run(self, argv: List[str], cwd: Optional[str] = None, env: Optional[Dict[str, str]] = None):
        """Start the process and return (exit code, message)."""
        logger.info(f"Running: {' '.join(argv)}" + (f" (cwd={cwd})" if cwd else ""))
        try:
            returncode = self.runner(argv, cwd=cwd, env=env)
        except FileNotFoundError:
            return COMMAND_NOT_FOUND, f"command not found: {argv[0]}"
        except PermissionError:
            return COMMAND_NOT_EXECUTABLE, f"permission denied: {argv[0]}"

        logger.info(f"Exit status {returncode}: {' '.join(argv)}")
        if returncode == 0:
            return returncode, ""
        return returncode, f"command exited with status {returncode}"

    def _transition(self, state: ExecutionState) -> None:
        logger.debug(f"Executor state: {self.state.value} -> {state.value}")
        self.state = state
        self._history.append(state)

    def _finish(
        self,
        command: str,
        state: ExecutionState,
        returncode: Optional[int] = None,
        escalated: bool = False,
        message: str = "",
    ) -> ExecutionResult:
        self._transition(state)
        return ExecutionResult(
            command=command,
            state=state,
            returncode=returncode,
            escalated=escalated,
            message=message,
            history=list(self._history),
        )
