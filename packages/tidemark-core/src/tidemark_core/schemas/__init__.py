"""Schema definitions for tidemark.

Identity and severity:
- ArtifactId: Immutable (group, name) artifact identity
- SemanticBump: Ordered bump severity with max reduction
- SemanticVersion: Parsed version with the increment rule

Intents:
- IntentRecord: Parsed intent file (bumps plus body)
- ChangeNote: Note for one artifact in one severity bucket

Outcomes:
- PropagationResult: Per-artifact outcomes of a run
"""

from __future__ import annotations

from tidemark_core.schemas.artifact import ArtifactId
from tidemark_core.schemas.bump import SemanticBump
from tidemark_core.schemas.intent import ChangeNote, IntentRecord
from tidemark_core.schemas.outcome import (
    ArtifactOutcome,
    ArtifactStatus,
    BumpOrigin,
    BumpRecord,
    PropagationResult,
    ReferenceMismatch,
    VersionChange,
)
from tidemark_core.schemas.version import SemanticVersion, increment

__all__ = [
    # Identity and severity
    "ArtifactId",
    "SemanticBump",
    "SemanticVersion",
    "increment",
    # Intents
    "IntentRecord",
    "ChangeNote",
    # Outcomes
    "ArtifactOutcome",
    "ArtifactStatus",
    "BumpOrigin",
    "BumpRecord",
    "PropagationResult",
    "ReferenceMismatch",
    "VersionChange",
]
