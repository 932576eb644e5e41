"""Unit tests for the verify command."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from click.testing import CliRunner

from tidemark_cli.errors import EXIT_USER_ERROR
from tidemark_cli.main import cli


class TestVerifyCommand:
    """Tests for tidemark verify."""

    def test_all_projects_by_default(
        self,
        cli_runner: CliRunner,
        create_reactor: Callable[..., Path],
        core_minor_intent: dict[str, str],
    ) -> None:
        """Test that the default mode requires every module to be covered."""
        root = create_reactor(intents=core_minor_intent)
        result = cli_runner.invoke(cli, ["verify", "--root", str(root)])

        assert result.exit_code == EXIT_USER_ERROR
        assert "Verification failed (all_projects)" in result.output

    def test_dependent_projects(
        self, cli_runner: CliRunner, create_reactor: Callable[..., Path]
    ) -> None:
        """Test that covering a module and its dependents passes."""
        root = create_reactor(
            intents={"x.md": "---\norg.example:core: minor\norg.example:app: patch\n---\n"}
        )
        result = cli_runner.invoke(
            cli, ["verify", "--root", str(root), "--mode", "dependent_projects"]
        )

        assert result.exit_code == 0, result.output
        assert "Verification passed (dependent_projects)" in result.output

    def test_mode_from_config(
        self,
        cli_runner: CliRunner,
        create_reactor: Callable[..., Path],
        core_minor_intent: dict[str, str],
    ) -> None:
        """Test that verification.mode in tidemark.yaml is the default."""
        root = create_reactor(
            intents=core_minor_intent,
            config="verification:\n  mode: at_least_one_project\n",
        )
        result = cli_runner.invoke(cli, ["verify", "--root", str(root)])

        assert result.exit_code == 0, result.output
        assert "at_least_one_project" in result.output

    def test_at_least_one_project_without_intents(
        self, cli_runner: CliRunner, create_reactor: Callable[..., Path]
    ) -> None:
        """Test that an empty versioning directory fails the rule."""
        root = create_reactor()
        result = cli_runner.invoke(
            cli, ["verify", "--root", str(root), "--mode", "at_least_one_project"]
        )

        assert result.exit_code == EXIT_USER_ERROR

    def test_consistent(self, cli_runner: CliRunner, create_reactor: Callable[..., Path]) -> None:
        """Test that --consistent rejects mixed bumps."""
        root = create_reactor(
            intents={"x.md": "---\norg.example:core: minor\norg.example:app: patch\n---\n"}
        )
        result = cli_runner.invoke(
            cli, ["verify", "--root", str(root), "--mode", "none", "--consistent"]
        )

        assert result.exit_code == EXIT_USER_ERROR
        assert "inconsistent" in result.output

    def test_unknown_artifact(self, cli_runner: CliRunner, create_reactor: Callable[..., Path]) -> None:
        """Test that intents naming unknown modules are rejected."""
        root = create_reactor(intents={"old.md": "---\norg.example:gone: patch\n---\n"})
        result = cli_runner.invoke(cli, ["verify", "--root", str(root), "--mode", "none"])

        assert result.exit_code == EXIT_USER_ERROR
        assert "org.example:gone" in result.output
