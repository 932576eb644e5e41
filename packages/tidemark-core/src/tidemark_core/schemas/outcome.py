"""Propagation outcome models.

Models for reporting what a propagation run did to each artifact.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from tidemark_core.schemas.artifact import ArtifactId
from tidemark_core.schemas.bump import SemanticBump


class BumpOrigin(str, Enum):
    """Where a bump came from.

    Attributes:
        EXPLICIT: Declared by an intent record (or a forced bump).
        CASCADED: Synthesized because a dependency was updated.
    """

    EXPLICIT = "explicit"
    CASCADED = "cascaded"


class ArtifactStatus(str, Enum):
    """Final status of an artifact after a run.

    Attributes:
        UPDATED: Version was bumped.
        SKIPPED: No bump applied.
        FAILED: Bump could not be applied.
    """

    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


class VersionChange(BaseModel):
    """Version of an artifact before and after a run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    before: str
    after: str


class BumpRecord(BaseModel):
    """The single bump an artifact received in a run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    artifact: ArtifactId
    severity: SemanticBump
    origin: BumpOrigin


class ArtifactOutcome(BaseModel):
    """What happened to one artifact.

    Attributes:
        artifact: Artifact identity.
        status: Updated, skipped or failed.
        bump: Applied (or attempted) bump, absent when skipped.
        change: Version change, present only when updated.
        reason: Failure cause, present only when failed.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    artifact: ArtifactId
    status: ArtifactStatus
    bump: BumpRecord | None = None
    change: VersionChange | None = None
    reason: str = ""


class ReferenceMismatch(BaseModel):
    """A reference left untouched because it did not hold the old version.

    Attributes:
        owner: Artifact whose manifest contains the reference.
        target: Artifact the reference points at.
        expected: Version the target had before the run.
        found: Version text the reference actually holds.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    owner: ArtifactId
    target: ArtifactId
    expected: str
    found: str


class PropagationResult(BaseModel):
    """Aggregated outcome of a propagation run.

    Outcomes of processed artifacts come first in processing order,
    followed by skipped artifacts in scope order.

    Example:
        >>> result.updated_count, result.failed_count
        (3, 0)
        >>> result.changes[ArtifactId.parse("org.example:core")].after
        '1.1.0'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    outcomes: list[ArtifactOutcome] = Field(default_factory=list, description="Per-artifact outcomes")
    mismatches: list[ReferenceMismatch] = Field(
        default_factory=list,
        description="References skipped during rewrite",
    )
    aborted: bool = Field(default=False, description="Run stopped by the abort policy")

    @property
    def changes(self) -> dict[ArtifactId, VersionChange]:
        """Version change per updated artifact, in processing order."""
        return {
            outcome.artifact: outcome.change
            for outcome in self.outcomes
            if outcome.change is not None
        }

    @property
    def failures(self) -> list[ArtifactOutcome]:
        """Outcomes of failed artifacts."""
        return [o for o in self.outcomes if o.status == ArtifactStatus.FAILED]

    @property
    def updated_count(self) -> int:
        """Count of updated artifacts."""
        return sum(1 for o in self.outcomes if o.status == ArtifactStatus.UPDATED)

    @property
    def skipped_count(self) -> int:
        """Count of skipped artifacts."""
        return sum(1 for o in self.outcomes if o.status == ArtifactStatus.SKIPPED)

    @property
    def failed_count(self) -> int:
        """Count of failed artifacts."""
        return sum(1 for o in self.outcomes if o.status == ArtifactStatus.FAILED)

    @property
    def succeeded(self) -> bool:
        """True when nothing failed."""
        return not self.aborted and self.failed_count == 0

    def outcome_for(self, artifact: ArtifactId) -> ArtifactOutcome | None:
        """Return the outcome of one artifact, if it was in scope."""
        for outcome in self.outcomes:
            if outcome.artifact == artifact:
                return outcome
        return None

    def to_text(self) -> str:
        """Generate a plain text report.

        Returns:
            One line per artifact plus a summary line.
        """
        lines: list[str] = []
        for outcome in self.outcomes:
            line = f"{outcome.artifact}: {outcome.status.value}"
            if outcome.change is not None and outcome.bump is not None:
                line += (
                    f" {outcome.change.before} -> {outcome.change.after}"
                    f" ({outcome.bump.severity.value}, {outcome.bump.origin.value})"
                )
            if outcome.reason:
                line += f" - {outcome.reason}"
            lines.append(line)
        lines.append(
            f"{self.updated_count} updated, {self.skipped_count} skipped, "
            f"{self.failed_count} failed of {len(self.outcomes)} artifacts"
        )
        return "\n".join(lines)
