"""Intent store.

Reduces intent records to one bump per artifact and keeps every note.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import structlog

from tidemark_core.errors import UnknownArtifactInIntentError
from tidemark_core.schemas.artifact import ArtifactId
from tidemark_core.schemas.bump import SemanticBump
from tidemark_core.schemas.intent import ChangeNote, IntentRecord

logger = structlog.get_logger(__name__)


class IntentStore:
    """Per-artifact bumps and change notes from a set of intent records.

    ``bump_map`` holds the strongest bump any record declares for an
    artifact. ``notes_map`` holds one note per record mentioning the
    artifact, tagged with the severity that record declares for it, in
    record order.

    Example:
        >>> store = IntentStore.from_records(records)
        >>> store.bump_for(ArtifactId.parse("org.example:core"))
        <SemanticBump.MAJOR: 'major'>
    """

    def __init__(
        self,
        bump_map: dict[ArtifactId, SemanticBump],
        notes_map: dict[ArtifactId, list[ChangeNote]],
        sources: list[Path] | None = None,
    ) -> None:
        self.bump_map = bump_map
        self.notes_map = notes_map
        self.sources = sources or []

    @classmethod
    def from_records(cls, records: Iterable[IntentRecord]) -> IntentStore:
        """Build the store from intent records, in order."""
        bump_map: dict[ArtifactId, SemanticBump] = {}
        notes_map: dict[ArtifactId, list[ChangeNote]] = {}
        sources: list[Path] = []

        for record in records:
            if record.source is not None:
                sources.append(record.source)
            for artifact, severity in record.bumps.items():
                bump_map[artifact] = SemanticBump.max(
                    bump_map.get(artifact, SemanticBump.NONE), severity
                )
                notes_map.setdefault(artifact, []).append(
                    ChangeNote(artifact=artifact, severity=severity, body=record.body)
                )

        return cls(bump_map, notes_map, sources)

    @property
    def is_empty(self) -> bool:
        """True when no record mentions any artifact."""
        return not self.bump_map

    @property
    def artifacts(self) -> set[ArtifactId]:
        """Every artifact named by an intent record."""
        return set(self.bump_map)

    def bump_for(self, artifact: ArtifactId) -> SemanticBump:
        """Strongest declared bump, NONE when no record mentions the artifact."""
        return self.bump_map.get(artifact, SemanticBump.NONE)

    def notes_for(self, artifact: ArtifactId) -> list[ChangeNote]:
        """Notes mentioning the artifact, in record order."""
        return list(self.notes_map.get(artifact, []))

    def validate(self, scope: Iterable[ArtifactId]) -> None:
        """Check every intent artifact belongs to the run scope.

        Raises:
            UnknownArtifactInIntentError: Listing every unknown artifact.
        """
        known = set(scope)
        unknown = [artifact for artifact in self.bump_map if artifact not in known]
        if unknown:
            raise UnknownArtifactInIntentError(
                unknown,
                internal_details=f"sources={[str(s) for s in self.sources]}",
            )
        logger.debug("intents_validated", artifacts=len(self.bump_map))

    def with_override(self, bump: SemanticBump, scope: Iterable[ArtifactId]) -> IntentStore:
        """Return a store forcing ``bump`` on every scope artifact.

        Notes are kept, so recorded descriptions still reach the changelog.
        """
        bump_map = {artifact: bump for artifact in scope}
        return IntentStore(bump_map, {k: list(v) for k, v in self.notes_map.items()}, self.sources)

    def distinct_bumps(self) -> set[SemanticBump]:
        """Distinct reduced bumps, one per artifact."""
        return set(self.bump_map.values())
