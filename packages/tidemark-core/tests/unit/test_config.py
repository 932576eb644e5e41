"""Unit tests for tidemark configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from tidemark_core.config import (
    CONFIG_ENV_VAR,
    ConfigResolver,
    FailurePolicy,
    GitMode,
    Modus,
    TidemarkConfig,
    VerificationMode,
    VersionBumpMode,
)
from tidemark_core.errors import ConfigurationError
from tidemark_core.schemas.bump import SemanticBump


class TestTidemarkConfigDefaults:
    """Tests for default values."""

    def test_defaults(self) -> None:
        """An empty configuration is usable."""
        config = TidemarkConfig()
        assert config.modus is Modus.PROJECT_VERSION
        assert config.versioning_directory == Path(".versioning")
        assert config.version_bump is VersionBumpMode.FILE_BASED
        assert config.version_header == "{version} - {date}"
        assert config.headers.major == "Major"
        assert config.headers.other == "Other"
        assert config.failure_policy is FailurePolicy.SKIP_ARTIFACT
        assert config.git is GitMode.NO_GIT
        assert config.verification.mode is VerificationMode.ALL_PROJECTS
        assert not config.dry_run

    def test_forced_bump(self) -> None:
        """Only the explicit bump modes force a bump."""
        assert VersionBumpMode.FILE_BASED.forced_bump is None
        assert VersionBumpMode.MAJOR.forced_bump is SemanticBump.MAJOR
        assert VersionBumpMode.PATCH.forced_bump is SemanticBump.PATCH

    def test_git_stages_files(self) -> None:
        """STASH and COMMIT stage files."""
        assert not GitMode.NO_GIT.stages_files
        assert GitMode.STASH.stages_files
        assert GitMode.COMMIT.stages_files

    def test_header_requires_version_placeholder(self) -> None:
        """version_header must contain {version}."""
        with pytest.raises(ValueError):
            TidemarkConfig(version_header="{date}")

    def test_with_overrides_ignores_none(self) -> None:
        """None overrides keep file values."""
        config = TidemarkConfig(backup=True)
        updated = config.with_overrides(dry_run=True, backup=None, git="commit")
        assert updated.dry_run
        assert updated.backup
        assert updated.git is GitMode.COMMIT
        assert config.with_overrides(dry_run=None) is config


class TestTidemarkConfigFromYaml:
    """Tests for loading tidemark.yaml."""

    def test_loads_values(self, tmp_path: Path) -> None:
        """Values in the file are validated into the model."""
        path = tmp_path / "tidemark.yaml"
        path.write_text(
            "modus: revision_property\n"
            "failure_policy: abort\n"
            "headers:\n"
            "  major: Breaking\n"
            "verification:\n"
            "  mode: dependent_projects\n"
            "  consistent: true\n"
        )
        config = TidemarkConfig.from_yaml(path)
        assert config.modus is Modus.REVISION_PROPERTY
        assert config.failure_policy is FailurePolicy.ABORT
        assert config.headers.major == "Breaking"
        assert config.headers.minor == "Minor"
        assert config.verification.consistent

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        """An empty file is the default configuration."""
        path = tmp_path / "tidemark.yaml"
        path.write_text("")
        assert TidemarkConfig.from_yaml(path) == TidemarkConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing explicit file is a configuration error."""
        with pytest.raises(ConfigurationError, match="not found"):
            TidemarkConfig.from_yaml(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """YAML syntax errors are configuration errors."""
        path = tmp_path / "tidemark.yaml"
        path.write_text("modus: [unclosed\n")
        with pytest.raises(ConfigurationError, match="not valid YAML"):
            TidemarkConfig.from_yaml(path)

    def test_unknown_field(self, tmp_path: Path) -> None:
        """Unknown keys are rejected with the field path."""
        path = tmp_path / "tidemark.yaml"
        path.write_text("colour: blue\n")
        with pytest.raises(ConfigurationError) as exc_info:
            TidemarkConfig.from_yaml(path)
        assert exc_info.value.field_path == "colour"

    def test_non_mapping(self, tmp_path: Path) -> None:
        """The document must be a mapping."""
        path = tmp_path / "tidemark.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            TidemarkConfig.from_yaml(path)


class TestConfigResolver:
    """Tests for configuration discovery."""

    def test_defaults_when_absent(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """No file anywhere yields defaults."""
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert ConfigResolver(tmp_path).load() == TidemarkConfig()

    def test_finds_root_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """<root>/tidemark.yaml is found."""
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        (tmp_path / "tidemark.yaml").write_text("backup: true\n")
        assert ConfigResolver(tmp_path).load().backup

    def test_finds_hidden_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """<root>/.tidemark/tidemark.yaml is found."""
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        (tmp_path / ".tidemark").mkdir()
        (tmp_path / ".tidemark" / "tidemark.yaml").write_text("dry_run: true\n")
        assert ConfigResolver(tmp_path).load().dry_run

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """$TIDEMARK_CONFIG takes precedence over the root file."""
        (tmp_path / "tidemark.yaml").write_text("backup: true\n")
        other = tmp_path / "other.yaml"
        other.write_text("git: stash\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(other))
        config = ConfigResolver(tmp_path).load()
        assert config.git is GitMode.STASH
        assert not config.backup

    def test_explicit_path_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """An explicit path skips discovery."""
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        (tmp_path / "tidemark.yaml").write_text("backup: true\n")
        explicit = tmp_path / "explicit.yaml"
        explicit.write_text("dry_run: true\n")
        config = ConfigResolver(tmp_path).load(explicit)
        assert config.dry_run
        assert not config.backup
