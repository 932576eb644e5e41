"""tidemark-core: coordinated semantic-version bumps for Maven reactors.

This package provides:
- Schemas: ArtifactId, SemanticBump, SemanticVersion, outcome models
- Reactor access: discovery, pom.xml documents, ManifestIndex
- DependencyGraph: forward references and dependents between artifacts
- IntentStore: per-artifact bumps and change notes from intent files
- PropagationEngine: explicit bumps plus cascaded PATCH bumps
- ChangelogMerger: severity-grouped changelog sections
- UpdateRunner / Verifier: end-to-end update and intent verification
"""

from __future__ import annotations

__version__ = "0.1.0"

from tidemark_core.changelog import ChangelogDocument, ChangelogFiles, ChangelogMerger
from tidemark_core.config import (
    ArtifactIdentifier,
    ConfigResolver,
    FailurePolicy,
    GitMode,
    Modus,
    SectionHeaders,
    TidemarkConfig,
    VerificationConfig,
    VerificationMode,
    VersionBumpMode,
)
from tidemark_core.engine import PropagationEngine
from tidemark_core.errors import (
    ChangelogError,
    ConfigurationError,
    HookError,
    IntentFormatError,
    MalformedVersionError,
    ManifestError,
    PropagationAbortedError,
    TidemarkError,
    UnknownArtifactInIntentError,
    VerificationError,
)
from tidemark_core.graph import DependencyGraph, GraphOutput
from tidemark_core.intents import IntentReader, IntentStore
from tidemark_core.observability import configure_logging
from tidemark_core.reactor import ManifestIndex, ReactorScanner
from tidemark_core.schemas import (
    ArtifactId,
    ArtifactOutcome,
    ArtifactStatus,
    BumpOrigin,
    ChangeNote,
    IntentRecord,
    PropagationResult,
    SemanticBump,
    SemanticVersion,
    VersionChange,
    increment,
)
from tidemark_core.updater import UpdateReport, UpdateRunner
from tidemark_core.verification import VerificationResult, Verifier
from tidemark_core.workspace import Workspace

__all__ = [
    # Version
    "__version__",
    # Schemas
    "ArtifactId",
    "ArtifactOutcome",
    "ArtifactStatus",
    "BumpOrigin",
    "ChangeNote",
    "IntentRecord",
    "PropagationResult",
    "SemanticBump",
    "SemanticVersion",
    "VersionChange",
    "increment",
    # Configuration
    "ArtifactIdentifier",
    "ConfigResolver",
    "FailurePolicy",
    "GitMode",
    "Modus",
    "SectionHeaders",
    "TidemarkConfig",
    "VerificationConfig",
    "VerificationMode",
    "VersionBumpMode",
    # Core
    "ChangelogDocument",
    "ChangelogFiles",
    "ChangelogMerger",
    "DependencyGraph",
    "GraphOutput",
    "IntentReader",
    "IntentStore",
    "ManifestIndex",
    "PropagationEngine",
    "ReactorScanner",
    # Orchestration
    "UpdateReport",
    "UpdateRunner",
    "VerificationResult",
    "Verifier",
    "Workspace",
    # Observability
    "configure_logging",
    # Errors
    "ChangelogError",
    "ConfigurationError",
    "HookError",
    "IntentFormatError",
    "MalformedVersionError",
    "ManifestError",
    "PropagationAbortedError",
    "TidemarkError",
    "UnknownArtifactInIntentError",
    "VerificationError",
]
