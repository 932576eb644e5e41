"""Unit tests for project scripts and git hooks."""

from __future__ import annotations

import subprocess
from collections.abc import Iterator
from datetime import date
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from tidemark_core.config import GitMode
from tidemark_core.errors import HookError
from tidemark_core.hooks import GitClient, ScriptRunner
from tidemark_core.schemas.outcome import VersionChange

CHANGE = VersionChange(before="1.0.0", after="1.1.0")


@pytest.fixture
def mock_run() -> Iterator[MagicMock]:
    """Patch subprocess.run inside the hooks module."""
    with patch("tidemark_core.hooks.subprocess.run") as mocked:
        mocked.return_value = subprocess.CompletedProcess(args=[], returncode=0, stdout="ok")
        yield mocked


class TestScriptRunner:
    """Tests for post-update scripts."""

    def test_environment(self, tmp_path: Path) -> None:
        """Scripts see the version change, flags and execution date."""
        runner = ScriptRunner(tmp_path, [], dry_run=True, git_stash=False, today=date(2024, 3, 1))
        env = runner.environment(CHANGE)
        assert env["CURRENT_VERSION"] == "1.0.0"
        assert env["NEW_VERSION"] == "1.1.0"
        assert env["DRY_RUN"] == "true"
        assert env["GIT_STASH"] == "false"
        assert env["EXECUTION_DATE"] == "2024-03-01"

    def test_command_resolves_root_scripts(self, tmp_path: Path) -> None:
        """A script path relative to the reactor root is made absolute."""
        (tmp_path / "scripts").mkdir()
        (tmp_path / "scripts" / "post.sh").write_text("#!/bin/sh\n", encoding="utf-8")
        runner = ScriptRunner(tmp_path, [])

        assert runner.command("scripts/post.sh --fast") == [
            str((tmp_path / "scripts" / "post.sh").resolve()),
            "--fast",
        ]
        assert runner.command("mvn -q verify") == ["mvn", "-q", "verify"]

    def test_runs_in_project_directory(self, tmp_path: Path, mock_run: MagicMock) -> None:
        """Every script runs once in the project directory."""
        runner = ScriptRunner(tmp_path, ["echo one", "echo two"])
        runner.run(tmp_path / "core", CHANGE)

        assert [c.args[0] for c in mock_run.call_args_list] == [["echo", "one"], ["echo", "two"]]
        assert all(c.kwargs["cwd"] == tmp_path / "core" for c in mock_run.call_args_list)
        assert mock_run.call_args.kwargs["env"]["NEW_VERSION"] == "1.1.0"

    def test_failing_script(self, tmp_path: Path, mock_run: MagicMock) -> None:
        """A non-zero exit status becomes a HookError."""
        mock_run.side_effect = subprocess.CalledProcessError(3, ["false"], stderr="boom")
        with pytest.raises(HookError, match="exited with status 3") as exc_info:
            ScriptRunner(tmp_path, ["false"]).run(tmp_path, CHANGE)
        assert exc_info.value.internal_details == "boom"

    def test_missing_executable(self, tmp_path: Path, mock_run: MagicMock) -> None:
        """An executable that cannot be started becomes a HookError."""
        mock_run.side_effect = FileNotFoundError("no such file")
        with pytest.raises(HookError):
            ScriptRunner(tmp_path, ["does-not-exist"]).run(tmp_path, CHANGE)


class TestGitClient:
    """Tests for git staging and committing."""

    def test_no_git_does_nothing(self, tmp_path: Path, mock_run: MagicMock) -> None:
        """NO_GIT never calls git."""
        git = GitClient(tmp_path, GitMode.NO_GIT)
        assert git.status() == ""
        git.stage([tmp_path / "pom.xml"])
        git.commit("message")
        mock_run.assert_not_called()

    def test_stash_stages_without_commit(self, tmp_path: Path, mock_run: MagicMock) -> None:
        """STASH stages files but does not commit."""
        git = GitClient(tmp_path, GitMode.STASH)
        git.stage([tmp_path / "pom.xml"])
        git.commit("message")
        assert [c.args[0] for c in mock_run.call_args_list] == [
            ["git", "add", str(tmp_path / "pom.xml")]
        ]

    def test_commit(self, tmp_path: Path, mock_run: MagicMock) -> None:
        """COMMIT stages and commits with the given message."""
        git = GitClient(tmp_path, GitMode.COMMIT)
        git.stage([tmp_path / "pom.xml"])
        git.commit("Updated 1 project version(s) [skip ci]")
        assert mock_run.call_args_list[-1].args[0] == [
            "git",
            "commit",
            "-m",
            "Updated 1 project version(s) [skip ci]",
        ]

    def test_stage_nothing(self, tmp_path: Path, mock_run: MagicMock) -> None:
        """Staging an empty list does not call git."""
        GitClient(tmp_path, GitMode.COMMIT).stage([])
        mock_run.assert_not_called()

    def test_status(self, tmp_path: Path, mock_run: MagicMock) -> None:
        """status returns git's output when enabled."""
        assert GitClient(tmp_path, GitMode.STASH).status() == "ok"
