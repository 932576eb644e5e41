"""Configuration for tidemark runs.

This module handles loading and resolving tidemark.yaml:
- TidemarkConfig: Validated run configuration
- ConfigResolver: File discovery (explicit path, TIDEMARK_CONFIG, root search paths)
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tidemark_core.errors import ConfigurationError
from tidemark_core.schemas.bump import SemanticBump

logger = logging.getLogger(__name__)

# Environment variable pointing at an explicit configuration file
CONFIG_ENV_VAR = "TIDEMARK_CONFIG"

# Standard configuration file name
CONFIG_FILE_NAME = "tidemark.yaml"

# Locations searched relative to the reactor root
CONFIG_SEARCH_PATHS = (
    Path("."),
    Path(".tidemark"),
)

DEFAULT_DEPENDENCY_BUMP_NOTE = "Project version bumped as result of dependency bumps"
DEFAULT_COMMIT_MESSAGE = "Updated {number_of_projects} project version(s) [skip ci]"


class Modus(str, Enum):
    """Which projects are in scope and where their version lives.

    Attributes:
        PROJECT_VERSION: Every reactor project, version in project/version.
        REVISION_PROPERTY: Root project only, version in project/properties/revision.
        PROJECT_VERSION_ONLY_LEAFS: Projects without modules, version in project/version.
    """

    PROJECT_VERSION = "project_version"
    REVISION_PROPERTY = "revision_property"
    PROJECT_VERSION_ONLY_LEAFS = "project_version_only_leafs"


class VersionBumpMode(str, Enum):
    """Source of the explicit bumps.

    Attributes:
        FILE_BASED: Bumps come from intent files.
        MAJOR: Every project in scope gets a MAJOR bump.
        MINOR: Every project in scope gets a MINOR bump.
        PATCH: Every project in scope gets a PATCH bump.
    """

    FILE_BASED = "file_based"
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    @property
    def forced_bump(self) -> SemanticBump | None:
        """Bump forced on every project, None for file based runs."""
        if self is VersionBumpMode.FILE_BASED:
            return None
        return SemanticBump(self.value)


class GitMode(str, Enum):
    """What to do with version control after an update.

    Attributes:
        NO_GIT: Leave the working tree alone.
        STASH: Stage every written file.
        COMMIT: Stage every written file and commit.
    """

    NO_GIT = "no_git"
    STASH = "stash"
    COMMIT = "commit"

    @property
    def stages_files(self) -> bool:
        """True when written files are staged."""
        return self in (GitMode.STASH, GitMode.COMMIT)


class FailurePolicy(str, Enum):
    """Reaction to a malformed version during propagation.

    Attributes:
        SKIP_ARTIFACT: Record the failure and keep going; partial success is written.
        ABORT: Stop at the first failure; nothing is written.
    """

    SKIP_ARTIFACT = "skip_artifact"
    ABORT = "abort"


class ArtifactIdentifier(str, Enum):
    """How intent files name artifacts.

    Attributes:
        GROUP_AND_NAME: ``group:name`` keys.
        NAME_ONLY: Bare artifact names, resolved against the reactor.
    """

    GROUP_AND_NAME = "group_and_name"
    NAME_ONLY = "name_only"


class VerificationMode(str, Enum):
    """Rule applied by ``tidemark verify``.

    Attributes:
        NONE: Always passes.
        AT_LEAST_ONE_PROJECT: At least one intent record exists.
        DEPENDENT_PROJECTS: Every dependent of a bumped project has an intent.
        ALL_PROJECTS: Every project in scope has an intent, and nothing else.
    """

    NONE = "none"
    AT_LEAST_ONE_PROJECT = "at_least_one_project"
    DEPENDENT_PROJECTS = "dependent_projects"
    ALL_PROJECTS = "all_projects"


class SectionHeaders(BaseModel):
    """Changelog subsection labels per severity bucket."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    major: str = Field(default="Major", min_length=1)
    minor: str = Field(default="Minor", min_length=1)
    patch: str = Field(default="Patch", min_length=1)
    other: str = Field(default="Other", min_length=1)


class VerificationConfig(BaseModel):
    """Settings for ``tidemark verify``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    mode: VerificationMode = Field(default=VerificationMode.ALL_PROJECTS)
    consistent: bool = Field(
        default=False,
        description="Require every intent to declare the same bump",
    )


class TidemarkConfig(BaseModel):
    """Validated contents of tidemark.yaml.

    Every field has a default, so an absent file yields a usable
    configuration.

    Example:
        >>> config = TidemarkConfig.from_yaml("tidemark.yaml")
        >>> config.version_header
        '{version} - {date}'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    modus: Modus = Field(default=Modus.PROJECT_VERSION)
    versioning_directory: Path = Field(
        default=Path(".versioning"),
        description="Directory holding intent files, relative to the reactor root",
    )
    version_bump: VersionBumpMode = Field(default=VersionBumpMode.FILE_BASED)
    version_header: str = Field(
        default="{version} - {date}",
        description="Template for the changelog version heading",
    )
    headers: SectionHeaders = Field(default_factory=SectionHeaders)
    changelog_file: str = Field(default="CHANGELOG.md", min_length=1)
    dependency_bump_note: str = Field(default=DEFAULT_DEPENDENCY_BUMP_NOTE)
    artifact_identifier: ArtifactIdentifier = Field(default=ArtifactIdentifier.GROUP_AND_NAME)
    failure_policy: FailurePolicy = Field(default=FailurePolicy.SKIP_ARTIFACT)
    dry_run: bool = False
    backup: bool = False
    git: GitMode = Field(default=GitMode.NO_GIT)
    commit_message: str = Field(default=DEFAULT_COMMIT_MESSAGE, min_length=1)
    scripts: list[str] = Field(
        default_factory=list,
        description="Commands run in each updated project directory",
    )
    verification: VerificationConfig = Field(default_factory=VerificationConfig)

    @field_validator("version_header")
    @classmethod
    def validate_version_header(cls, v: str) -> str:
        """Require the {version} placeholder in the heading template.

        Raises:
            ValueError: If the placeholder is missing.
        """
        if "{version}" not in v:
            raise ValueError("version_header must contain '{version}'")
        return v

    @classmethod
    def from_yaml(cls, path: str | Path) -> TidemarkConfig:
        """Load and validate configuration from a YAML file.

        Args:
            path: Path to tidemark.yaml.

        Returns:
            Validated TidemarkConfig instance.

        Raises:
            ConfigurationError: If the file is missing, not YAML or invalid.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError("Configuration file not found", file_path=path)

        try:
            with path.open("r", encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                "Configuration file is not valid YAML",
                file_path=path,
                internal_details=str(e),
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration must be a mapping", file_path=path)

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            first = e.errors()[0]
            field_path = ".".join(str(part) for part in first["loc"])
            raise ConfigurationError(
                f"Invalid configuration: {first['msg']}",
                file_path=path,
                field_path=field_path or None,
                internal_details=str(e),
            ) from e

    def with_overrides(self, **overrides: Any) -> TidemarkConfig:
        """Return a copy with the given non-None values replaced.

        Used by the CLI to layer command line flags over file values.
        """
        update = {key: value for key, value in overrides.items() if value is not None}
        if not update:
            return self
        return self.model_validate({**self.model_dump(), **update})


class ConfigResolver:
    """Locates and loads tidemark.yaml for a reactor.

    Search order:
    1. Explicit path passed to ``load``
    2. $TIDEMARK_CONFIG
    3. ``<root>/tidemark.yaml``
    4. ``<root>/.tidemark/tidemark.yaml``

    When nothing is found, the default configuration is returned.

    Example:
        >>> config = ConfigResolver(Path("/repo")).load()
    """

    def __init__(
        self,
        root: Path,
        search_paths: tuple[Path, ...] | None = None,
    ) -> None:
        self.root = root
        self.search_paths = search_paths or CONFIG_SEARCH_PATHS

    def find(self) -> Path | None:
        """Return the first configuration file found, or None."""
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            logger.debug("Using configuration from %s=%s", CONFIG_ENV_VAR, env_path)
            return Path(env_path)

        for base_path in self.search_paths:
            candidate = self.root / base_path / CONFIG_FILE_NAME
            if candidate.exists():
                logger.debug("Found %s at %s", CONFIG_FILE_NAME, candidate)
                return candidate
        return None

    def load(self, path: Path | None = None) -> TidemarkConfig:
        """Load the configuration.

        Args:
            path: Explicit configuration file. Skips discovery when given.

        Returns:
            Validated TidemarkConfig, defaults when no file exists.

        Raises:
            ConfigurationError: If the located file is invalid.
        """
        resolved = path if path is not None else self.find()
        if resolved is None:
            logger.debug("No %s found under %s, using defaults", CONFIG_FILE_NAME, self.root)
            return TidemarkConfig()
        logger.info("Loading configuration from %s", resolved)
        return TidemarkConfig.from_yaml(resolved)
