"""Post-update hooks: project scripts and git.

This module provides:
- ScriptRunner: Runs configured commands in each updated project directory
- GitClient: Status, staging and commit through the git executable
"""

from __future__ import annotations

import os
import shlex
import subprocess
from datetime import date
from pathlib import Path

import structlog

from tidemark_core.config import GitMode
from tidemark_core.errors import HookError
from tidemark_core.schemas.outcome import VersionChange

logger = structlog.get_logger(__name__)


def _run(cmd: list[str], cwd: Path, env: dict[str, str] | None = None) -> str:
    try:
        completed = subprocess.run(
            cmd,
            cwd=cwd,
            env=env,
            check=True,
            capture_output=True,
            text=True,
        )
    except subprocess.CalledProcessError as e:
        raise HookError(cmd, e.returncode, internal_details=e.stderr) from e
    except OSError as e:
        raise HookError(cmd, -1, internal_details=str(e)) from e
    return completed.stdout


class ScriptRunner:
    """Runs post-update scripts for updated projects.

    Each command runs in the project directory with these variables set:
    CURRENT_VERSION, NEW_VERSION, DRY_RUN, GIT_STASH and EXECUTION_DATE.
    A relative script path that exists under the reactor root is resolved
    against it.

    Args:
        root: Reactor root.
        scripts: Commands to run, in order.
        dry_run: Exposed to scripts as DRY_RUN.
        git_stash: Exposed to scripts as GIT_STASH.
        today: Exposed to scripts as EXECUTION_DATE.
    """

    def __init__(
        self,
        root: Path,
        scripts: list[str],
        *,
        dry_run: bool = False,
        git_stash: bool = False,
        today: date | None = None,
    ) -> None:
        self.root = root
        self.scripts = scripts
        self.dry_run = dry_run
        self.git_stash = git_stash
        self.today = today or date.today()

    def environment(self, change: VersionChange) -> dict[str, str]:
        """Environment passed to every script for one project."""
        return {
            **os.environ,
            "CURRENT_VERSION": change.before,
            "NEW_VERSION": change.after,
            "DRY_RUN": str(self.dry_run).lower(),
            "GIT_STASH": str(self.git_stash).lower(),
            "EXECUTION_DATE": self.today.isoformat(),
        }

    def command(self, script: str) -> list[str]:
        """Split a script entry into an argument list."""
        cmd = shlex.split(script)
        if cmd and not Path(cmd[0]).is_absolute() and (self.root / cmd[0]).is_file():
            cmd[0] = str((self.root / cmd[0]).resolve())
        return cmd

    def run(self, directory: Path, change: VersionChange) -> None:
        """Run every script for one updated project.

        Raises:
            HookError: If a script exits with a non-zero status.
        """
        env = self.environment(change)
        for script in self.scripts:
            cmd = self.command(script)
            logger.info("script_started", script=script, directory=str(directory))
            output = _run(cmd, directory, env)
            logger.debug("script_completed", script=script, output=output)


class GitClient:
    """Minimal git operations on the reactor's working tree.

    Example:
        >>> git = GitClient(Path("/repo"), GitMode.COMMIT)
        >>> git.stage([Path("/repo/core/pom.xml")])
        >>> git.commit("Updated 1 project version(s) [skip ci]")
    """

    def __init__(self, root: Path, mode: GitMode = GitMode.NO_GIT) -> None:
        self.root = root
        self.mode = mode

    @property
    def enabled(self) -> bool:
        return self.mode is not GitMode.NO_GIT

    def status(self) -> str:
        """Return ``git status`` output, empty when git is disabled."""
        if not self.enabled:
            return ""
        return _run(["git", "status"], self.root)

    def stage(self, paths: list[Path]) -> None:
        """Stage files when the mode stages files."""
        if not self.mode.stages_files or not paths:
            return
        _run(["git", "add", *(str(p) for p in paths)], self.root)
        logger.info("git_staged", files=len(paths))

    def commit(self, message: str) -> None:
        """Commit staged files when the mode commits."""
        if self.mode is not GitMode.COMMIT:
            return
        _run(["git", "commit", "-m", message], self.root)
        logger.info("git_committed", message=message)
