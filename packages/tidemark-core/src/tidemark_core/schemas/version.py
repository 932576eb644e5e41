"""Semantic version parsing and the increment rule."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

from tidemark_core.errors import MalformedVersionError
from tidemark_core.schemas.bump import SemanticBump

VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)\.(\d+)(-[a-zA-Z0-9.-]+)?$")


class SemanticVersion(BaseModel):
    """A ``MAJOR.MINOR.PATCH[-qualifier]`` version.

    The qualifier, including its leading dash, is carried verbatim
    through every bump.

    Example:
        >>> str(SemanticVersion.parse("1.4.2-SNAPSHOT").bump(SemanticBump.MINOR))
        '1.5.0-SNAPSHOT'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    major: int = Field(..., ge=0)
    minor: int = Field(..., ge=0)
    patch: int = Field(..., ge=0)
    suffix: str = Field(default="", description="Qualifier including the leading '-'")

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        """Parse a version string.

        Args:
            text: Version text; surrounding whitespace is ignored.

        Returns:
            Parsed SemanticVersion.

        Raises:
            MalformedVersionError: If the text is not a semantic version.
        """
        match = VERSION_PATTERN.match(text.strip())
        if match is None:
            raise MalformedVersionError(text)
        return cls(
            major=int(match.group(1)),
            minor=int(match.group(2)),
            patch=int(match.group(3)),
            suffix=match.group(4) or "",
        )

    @classmethod
    def is_valid(cls, text: str) -> bool:
        """Return True if the text parses as a semantic version."""
        return VERSION_PATTERN.match(text.strip()) is not None

    def bump(self, severity: SemanticBump) -> SemanticVersion:
        """Return the version after applying a bump.

        NONE returns the version unchanged.
        """
        if severity is SemanticBump.MAJOR:
            return self.model_copy(update={"major": self.major + 1, "minor": 0, "patch": 0})
        if severity is SemanticBump.MINOR:
            return self.model_copy(update={"minor": self.minor + 1, "patch": 0})
        if severity is SemanticBump.PATCH:
            return self.model_copy(update={"patch": self.patch + 1})
        return self

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}{self.suffix}"


def increment(version: str, severity: SemanticBump) -> str:
    """Apply a bump to a version string.

    Args:
        version: Current version text.
        severity: Bump to apply. Callers skip NONE; it is a no-op here.

    Returns:
        The bumped version text.

    Raises:
        MalformedVersionError: If ``version`` is not a semantic version.

    Example:
        >>> increment("1.0.0", SemanticBump.MINOR)
        '1.1.0'
    """
    return str(SemanticVersion.parse(version).bump(severity))
