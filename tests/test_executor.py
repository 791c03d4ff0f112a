"""Tests for the command executor state machine."""
import io
import logging

import pytest
from rich.console import Console

from checkpoint.core.config import CheckpointConfig, set_config
from checkpoint.core.errors import CommandError, WritePermissionError
from checkpoint.core.executor import (
    CommandExecutor,
    ExecutionState,
    install_environment,
    is_permission_failure,
    tokenize,
)

S = ExecutionState


class RecordingRunner:
    """Runner returning scripted exit codes and recording every call."""

    def __init__(self, *codes):
        self.codes = list(codes)
        self.calls = []

    def __call__(self, argv, cwd=None, env=None):
        self.calls.append({"argv": argv, "cwd": cwd, "env": env})
        code = self.codes.pop(0)
        if isinstance(code, Exception):
            raise code
        return code


class ScriptedConfirm:
    def __init__(self, *answers):
        self.answers = list(answers)
        self.questions = []

    def __call__(self, question):
        self.questions.append(question)
        return self.answers.pop(0)


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def make_executor(output):
    def _make(runner, confirm=None, probe=lambda path: True):
        return CommandExecutor(
            console=Console(file=output, width=120),
            runner=runner,
            confirm=confirm or ScriptedConfirm(),
            probe=probe,
            escalation_command="sudo",
        )
    return _make


class TestHelpers:
    """Test tokenizing and failure classification."""

    def test_tokenize_ignores_quotes(self):
        assert tokenize('echo "a  b"') == ["echo", '"a', 'b"']

    @pytest.mark.parametrize("command,code,expected", [
        ("make install", 100, True),
        ("apt install vim", 1, True),
        ("dnf install vim", 2, True),
        ("pacman -S vim", 1, True),
        ("make install", 1, False),
        ("apt install vim", 3, False),
        ("cp a b", 2, False),
        ("true", 0, False),
    ])
    def test_is_permission_failure(self, command, code, expected):
        assert is_permission_failure(command, code) is expected

    def test_install_environment(self):
        env = install_environment("/mnt/data", base={"PATH": "/usr/bin"})
        assert env == {
            "PATH": "/usr/bin",
            "PREFIX": "/mnt/data",
            "DESTDIR": "/mnt/data",
            "INSTALL_ROOT": "/mnt/data",
        }


class TestExecute:
    """Test single runs without escalation."""

    def test_success(self, make_executor):
        runner = RecordingRunner(0)
        result = make_executor(runner).execute("echo hello")

        assert result.ok
        assert result.returncode == 0
        assert result.escalated is False
        assert result.history == [S.IDLE, S.RUNNING, S.SUCCESS]
        assert runner.calls == [{"argv": ["echo", "hello"], "cwd": None, "env": None}]

    def test_target_sets_working_directory_and_environment(self, make_executor, make_disk):
        runner = RecordingRunner(0)
        target = make_disk(mount_point="/mnt/data")
        result = make_executor(runner).execute("make install", target)

        assert result.ok
        call = runner.calls[0]
        assert call["cwd"] == "/mnt/data"
        assert call["env"]["PREFIX"] == "/mnt/data"
        assert call["env"]["DESTDIR"] == "/mnt/data"
        assert call["env"]["INSTALL_ROOT"] == "/mnt/data"

    def test_unwritable_target_runs_nothing(self, make_executor, make_disk):
        runner = RecordingRunner(0)
        executor = make_executor(runner, probe=lambda path: False)

        with pytest.raises(WritePermissionError, match="/mnt/data"):
            executor.execute("make install", make_disk(mount_point="/mnt/data"))
        assert runner.calls == []

    def test_empty_command(self, make_executor):
        with pytest.raises(CommandError):
            make_executor(RecordingRunner()).execute("   ")

    def test_plain_failure_is_not_retried(self, make_executor):
        runner = RecordingRunner(1)
        confirm = ScriptedConfirm()
        result = make_executor(runner, confirm).execute("make install")

        assert result.state is S.FAILED
        assert result.returncode == 1
        assert result.message == "command exited with status 1"
        assert confirm.questions == []
        assert len(runner.calls) == 1

    def test_missing_program(self, make_executor):
        runner = RecordingRunner(FileNotFoundError("nope"))
        result = make_executor(runner).execute("no-such-tool --flag")

        assert result.state is S.FAILED
        assert result.returncode == 127
        assert result.message == "command not found: no-such-tool"

    def test_not_executable(self, make_executor):
        runner = RecordingRunner(PermissionError("denied"))
        result = make_executor(runner).execute("./script.sh")

        assert result.state is S.FAILED
        assert result.returncode == 126


class TestEscalationKeywordPreflight:
    """Commands already containing the escalation keyword."""

    def test_declined(self, make_executor):
        runner = RecordingRunner()
        confirm = ScriptedConfirm(False)
        result = make_executor(runner, confirm).execute("sudo apt install vim")

        assert result.cancelled
        assert result.message == "command cancelled by user"
        assert confirm.questions == ["Run it anyway?"]
        assert runner.calls == []

    def test_accepted_runs_as_given(self, make_executor):
        runner = RecordingRunner(0)
        result = make_executor(runner, ScriptedConfirm(True)).execute("sudo apt install vim")

        assert result.ok
        assert runner.calls[0]["argv"] == ["sudo", "apt", "install", "vim"]


class TestEscalationRetry:
    """Permission failures and the escalated retry."""

    def test_exit_100_prompts(self, make_executor):
        runner = RecordingRunner(100)
        confirm = ScriptedConfirm(False)
        result = make_executor(runner, confirm).execute("make install")

        assert confirm.questions == ["Retry with sudo?"]
        assert result.cancelled
        assert result.history == [S.IDLE, S.RUNNING, S.PERMISSION_SUSPECTED, S.PROMPT_USER, S.CANCELLED]
        assert len(runner.calls) == 1

    def test_package_manager_exit_1_prompts(self, make_executor, output):
        confirm = ScriptedConfirm(False)
        make_executor(RecordingRunner(1), confirm).execute("apt install vim")

        assert confirm.questions == ["Retry with sudo?"]
        assert "SECURITY WARNING" in output.getvalue()

    def test_accepted_retry_is_prefixed_and_drops_target(self, make_executor, make_disk, output):
        runner = RecordingRunner(100, 0)
        target = make_disk(mount_point="/mnt/data")
        result = make_executor(runner, ScriptedConfirm(True)).execute("apt install vim", target)

        assert result.ok
        assert result.escalated is True
        assert result.command == "sudo apt install vim"
        assert result.history == [
            S.IDLE, S.RUNNING, S.PERMISSION_SUSPECTED, S.PROMPT_USER, S.RETRY_ESCALATED, S.SUCCESS,
        ]
        assert runner.calls[1] == {"argv": ["sudo", "apt", "install", "vim"], "cwd": None, "env": None}
        assert "may not apply" in output.getvalue()

    def test_failed_retry(self, make_executor):
        runner = RecordingRunner(100, 1)
        result = make_executor(runner, ScriptedConfirm(True)).execute("make install")

        assert result.state is S.FAILED
        assert result.escalated is True
        assert result.returncode == 1

    def test_keyword_not_doubled(self, make_executor):
        """Leading keyword is kept once when the pre-flight was accepted."""
        runner = RecordingRunner(100, 0)
        make_executor(runner, ScriptedConfirm(True, True)).execute("sudo make install")
        assert runner.calls[1]["argv"] == ["sudo", "make", "install"]


def test_escalation_command_from_config():
    set_config(CheckpointConfig(escalation_command="doas"))
    executor = CommandExecutor(console=Console(file=io.StringIO()), confirm=lambda q: False)
    assert executor.escalation_command == "doas"


class TestSeparateEscalationConsent:
    """The escalated retry asks its own question."""

    def test_preflight_answer_does_not_approve_retry(self, make_executor):
        runner = RecordingRunner(100)
        preflight = ScriptedConfirm(True)
        escalation = ScriptedConfirm(False)
        executor = make_executor(runner, preflight)
        executor.confirm_escalation = escalation

        result = executor.execute("sudo make install")

        assert result.cancelled
        assert preflight.questions == ["Run it anyway?"]
        assert escalation.questions == ["Retry with sudo?"]
        assert len(runner.calls) == 1

    def test_escalation_confirm_defaults_to_confirm(self, make_executor):
        confirm = ScriptedConfirm()
        executor = make_executor(RecordingRunner(), confirm)
        assert executor.confirm_escalation is confirm


class TestStateLogging:
    """State history and log output."""

    def test_reused_executor_starts_idle(self, make_executor, caplog):
        executor = make_executor(RecordingRunner(0, 0))
        executor.execute("true")

        with caplog.at_level(logging.DEBUG, logger="checkpoint.core.executor"):
            result = executor.execute("true")

        assert result.history == [S.IDLE, S.RUNNING, S.SUCCESS]
        messages = [r.getMessage() for r in caplog.records]
        assert "Executor state: idle -> running" in messages
        assert not any(m.endswith("-> idle") for m in messages)

    def test_unwritable_target_not_logged_as_warning(self, make_executor, make_disk, caplog):
        executor = make_executor(RecordingRunner(), probe=lambda path: False)

        with caplog.at_level(logging.DEBUG, logger="checkpoint.core.executor"):
            with pytest.raises(WritePermissionError):
                executor.execute("make install", make_disk())

        assert all(r.levelno < logging.WARNING for r in caplog.records)
