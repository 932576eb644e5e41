"""Artifact identity model.

An ArtifactId identifies one module of the reactor by its Maven
coordinates (groupId, artifactId). It is the key of every map and set
in tidemark.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

COORDINATE_PATTERN = r"^[^:\s]+$"


class ArtifactId(BaseModel):
    """Immutable (group, name) identity of a reactor artifact.

    Equality and hashing are structural. Artifacts sort by group, then
    name. The canonical string form is ``group:name``.

    Attributes:
        group: Maven groupId.
        name: Maven artifactId.

    Example:
        >>> artifact = ArtifactId.parse("org.example:core")
        >>> str(artifact)
        'org.example:core'
        >>> artifact == ArtifactId(group="org.example", name="core")
        True
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    group: str = Field(
        ...,
        min_length=1,
        pattern=COORDINATE_PATTERN,
        description="Maven groupId",
    )
    name: str = Field(
        ...,
        min_length=1,
        pattern=COORDINATE_PATTERN,
        description="Maven artifactId",
    )

    @classmethod
    def parse(cls, text: str) -> ArtifactId:
        """Parse the canonical ``group:name`` form.

        Args:
            text: Identity string with exactly one colon.

        Returns:
            Parsed ArtifactId.

        Raises:
            ValueError: If the text does not have exactly two non-empty parts.
        """
        parts = text.strip().split(":")
        if len(parts) != 2 or not all(parts):
            raise ValueError(f"Expected 'group:name', got '{text}'")
        return cls(group=parts[0], name=parts[1])

    def __str__(self) -> str:
        return f"{self.group}:{self.name}"

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, ArtifactId):
            return NotImplemented
        return (self.group, self.name) < (other.group, other.name)
