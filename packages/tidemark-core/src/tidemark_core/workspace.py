"""Reactor workspace.

Loads, in order, everything a command needs from a reactor on disk:
projects, scope, intents, manifests and the dependency graph.
"""

from __future__ import annotations

from functools import cached_property
from pathlib import Path

import structlog

from tidemark_core.config import TidemarkConfig
from tidemark_core.graph import DependencyGraph
from tidemark_core.intents.reader import IntentReader
from tidemark_core.intents.store import IntentStore
from tidemark_core.reactor.discovery import ReactorProject, ReactorScanner, select_scope
from tidemark_core.reactor.index import ManifestIndex
from tidemark_core.schemas.artifact import ArtifactId

logger = structlog.get_logger(__name__)


class Workspace:
    """Lazily loaded view of a reactor for one run.

    Args:
        root: Reactor root directory (holding the root pom.xml).
        config: Run configuration.

    Example:
        >>> workspace = Workspace(Path("/repo"), TidemarkConfig())
        >>> workspace.store.validate(workspace.scope)
        >>> graph = workspace.graph
    """

    def __init__(self, root: Path, config: TidemarkConfig) -> None:
        self.root = root.resolve()
        self.config = config

    @property
    def versioning_directory(self) -> Path:
        """Directory holding the intent files."""
        return self.root / self.config.versioning_directory

    @cached_property
    def projects(self) -> list[ReactorProject]:
        """Every reactor project, root first."""
        return ReactorScanner(self.root).scan()

    @cached_property
    def scope_projects(self) -> list[ReactorProject]:
        """Projects the run operates on."""
        return select_scope(self.projects, self.config.modus)

    @property
    def scope(self) -> list[ArtifactId]:
        """Artifacts in scope, in reactor order."""
        return [project.artifact for project in self.scope_projects]

    @cached_property
    def store(self) -> IntentStore:
        """Intent store read from the versioning directory."""
        reader = IntentReader(
            self.versioning_directory,
            identifier=self.config.artifact_identifier,
            scope=self.scope,
        )
        return IntentStore.from_records(reader.read_all())

    @cached_property
    def index(self) -> ManifestIndex:
        """Manifests of the projects in scope."""
        return ManifestIndex.load(self.scope_projects, self.config.modus)

    @cached_property
    def graph(self) -> DependencyGraph:
        """Dependency graph of the manifests in scope."""
        return DependencyGraph.build(self.index)

    def directories(self) -> dict[ArtifactId, Path]:
        """Project directory of every artifact in scope."""
        return {project.artifact: project.directory for project in self.scope_projects}
