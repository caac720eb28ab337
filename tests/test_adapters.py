"""
Tests for the adapter contract, the command runner, git and Spec-Kit adapters.
"""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

from bones.adapters.base import ExecutionContext
from bones.adapters.mock import MockToolRunner, create_git_dir
from bones.adapters.scaffolding.spec_kit import SpecKitAdapter
from bones.adapters.shell.command import CommandRunner
from bones.adapters.vcs.git import GitAdapter
from bones.core.models.config import DEFAULT_SPEC_TOOL_ARGS
from bones.core.models.outcome import ToolOutcome


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> MagicMock:
    result = MagicMock()
    result.returncode = returncode
    result.stdout = stdout
    result.stderr = stderr
    return result


# ── Protocol Tests ───────────────────────────────────────────────────


class TestExecutionContext:
    def test_argv(self, tmp_path: Path):
        ctx = ExecutionContext(tool="git", args=["init"], working_dir=tmp_path)
        assert ctx.argv == ["git", "init"]
        assert ctx.timeout is None


# ── Command runner ───────────────────────────────────────────────────


class TestCommandRunner:
    @patch("subprocess.run")
    def test_success(self, mock_run, tmp_path: Path):
        mock_run.return_value = _completed(0, stdout="Initialized empty repo\n")
        outcome = CommandRunner().run("git", ["init"], tmp_path)
        assert outcome.ok
        assert outcome.output == "Initialized empty repo"
        assert outcome.return_code == 0

        args, kwargs = mock_run.call_args
        assert args[0] == ["git", "init"]
        assert kwargs["cwd"] == str(tmp_path)
        assert kwargs["capture_output"] is True
        assert kwargs["timeout"] is None

    @patch("subprocess.run")
    def test_nonzero_exit(self, mock_run, tmp_path: Path):
        mock_run.return_value = _completed(2, stdout="partial", stderr="bad flag\n")
        outcome = CommandRunner().run("specify", ["init"], tmp_path)
        assert outcome.failed
        assert outcome.error == "bad flag"
        assert outcome.output == "partial"
        assert outcome.return_code == 2

    @patch("subprocess.run")
    def test_nonzero_exit_without_stderr(self, mock_run, tmp_path: Path):
        mock_run.return_value = _completed(3)
        outcome = CommandRunner().run("tool", [], tmp_path)
        assert outcome.failed
        assert "code 3" in outcome.error

    @patch("subprocess.run")
    def test_not_installed(self, mock_run, tmp_path: Path):
        mock_run.side_effect = FileNotFoundError("No such file: 'specify'")
        outcome = CommandRunner().run("specify", ["init"], tmp_path)
        assert outcome.not_found
        assert not outcome.failed

    @patch("subprocess.run")
    def test_not_executable(self, mock_run, tmp_path: Path):
        mock_run.side_effect = PermissionError("Permission denied")
        outcome = CommandRunner().run("specify", [], tmp_path)
        assert outcome.not_found
        assert "cannot be launched" in outcome.error

    @patch("subprocess.run")
    def test_timeout(self, mock_run, tmp_path: Path):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="specify", timeout=5)
        outcome = CommandRunner(timeout=5).run("specify", [], tmp_path)
        assert outcome.failed
        assert "timed out" in outcome.error
        assert mock_run.call_args[1]["timeout"] == 5

    @patch("subprocess.run")
    def test_missing_working_dir_is_failure(self, mock_run, tmp_path: Path):
        outcome = CommandRunner().run("git", ["init"], tmp_path / "gone")
        assert outcome.failed
        mock_run.assert_not_called()

    def test_real_missing_executable(self, tmp_path: Path):
        outcome = CommandRunner().run("bones-no-such-tool-xyz", [], tmp_path)
        assert outcome.not_found


# ── Mock runner ──────────────────────────────────────────────────────


class TestMockToolRunner:
    def test_default_success(self, tmp_path: Path):
        mock = MockToolRunner()
        outcome = mock.execute(ExecutionContext(tool="git", args=["init"], working_dir=tmp_path))
        assert outcome.ok
        assert mock.call_count == 1

    def test_set_missing(self, tmp_path: Path):
        mock = MockToolRunner()
        mock.set_missing("specify")
        outcome = mock.execute(ExecutionContext(tool="specify", working_dir=tmp_path))
        assert outcome.not_found

    def test_effect_skipped_on_failure(self, tmp_path: Path):
        mock = MockToolRunner()
        mock.set_effect("git", create_git_dir)
        mock.set_failure("git")
        mock.execute(ExecutionContext(tool="git", args=["init"], working_dir=tmp_path))
        assert not (tmp_path / ".git").exists()

    def test_reset(self, tmp_path: Path):
        mock = MockToolRunner()
        mock.set_failure("git")
        mock.execute(ExecutionContext(tool="git", working_dir=tmp_path))
        mock.reset()
        assert mock.call_count == 0
        assert mock.execute(ExecutionContext(tool="git", working_dir=tmp_path)).ok


# ── Git ──────────────────────────────────────────────────────────────


class TestGitAdapter:
    def test_init_runs_in_root(self, tmp_path: Path):
        runner = MockToolRunner()
        outcome = GitAdapter(runner).init_repository(tmp_path)
        assert outcome.ok
        call = runner.call_log[0]
        assert call.argv == ["git", "init"]
        assert call.working_dir == tmp_path

    def test_existing_repository_short_circuits(self, tmp_path: Path):
        (tmp_path / ".git").mkdir()
        runner = MockToolRunner()
        outcome = GitAdapter(runner).init_repository(tmp_path)
        assert outcome.ok
        assert outcome.note == "already initialized"
        assert runner.call_count == 0

    def test_custom_executable(self, tmp_path: Path):
        runner = MockToolRunner()
        GitAdapter(runner, executable="/usr/local/bin/git").init_repository(tmp_path)
        assert runner.call_log[0].tool == "/usr/local/bin/git"

    def test_not_found_passes_through(self, tmp_path: Path):
        runner = MockToolRunner()
        runner.set_missing("git")
        assert GitAdapter(runner).init_repository(tmp_path).not_found

    def test_name(self):
        assert GitAdapter(MockToolRunner()).name == "git"

    @patch("bones.adapters.vcs.git.which", return_value=False)
    def test_is_available(self, _which):
        assert not GitAdapter(MockToolRunner()).is_available()


# ── Spec-Kit ─────────────────────────────────────────────────────────


class TestSpecKitAdapter:
    def test_default_arguments(self, tmp_path: Path):
        runner = MockToolRunner()
        outcome = SpecKitAdapter(runner).setup(tmp_path)
        assert outcome.ok
        call = runner.call_log[0]
        assert call.tool == "specify"
        assert call.args == DEFAULT_SPEC_TOOL_ARGS
        assert call.working_dir == tmp_path

    def test_custom_arguments(self, tmp_path: Path):
        runner = MockToolRunner()
        SpecKitAdapter(runner, executable="uvx", args=["specify", "init"]).setup(tmp_path)
        assert runner.call_log[0].argv == ["uvx", "specify", "init"]

    def test_failure_reported(self, tmp_path: Path):
        runner = MockToolRunner()
        runner.set_response("specify", ToolOutcome.failure("specify", error="exploded"))
        outcome = SpecKitAdapter(runner).setup(tmp_path)
        assert outcome.failed
        assert outcome.error == "exploded"

    def test_repr(self):
        assert "spec-kit" in repr(SpecKitAdapter(MockToolRunner()))
