"""Intent records and change notes.

An intent record is an author-supplied statement of which artifacts
changed, at what severity, and with what description.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from tidemark_core.schemas.artifact import ArtifactId
from tidemark_core.schemas.bump import SemanticBump


class IntentRecord(BaseModel):
    """One parsed intent record.

    Attributes:
        bumps: Severity declared per artifact in this record.
        body: Free-form change description.
        source: File the record was read from, if any.

    Example:
        >>> record = IntentRecord(
        ...     bumps={ArtifactId.parse("org.example:core"): SemanticBump.MINOR},
        ...     body="Added streaming reader.",
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    bumps: dict[ArtifactId, SemanticBump] = Field(
        ...,
        min_length=1,
        description="Declared severity per artifact",
    )
    body: str = Field(default="", description="Change description")
    source: Path | None = Field(default=None, description="Originating intent file")


class ChangeNote(BaseModel):
    """A change description for one artifact in one severity bucket.

    Attributes:
        artifact: Artifact the note belongs to.
        severity: Severity the originating record declared for the artifact.
        body: Free-form text.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    artifact: ArtifactId
    severity: SemanticBump
    body: str = ""
