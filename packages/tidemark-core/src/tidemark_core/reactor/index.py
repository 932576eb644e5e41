"""In-memory index of the manifests in scope."""

from __future__ import annotations

from collections.abc import Iterator

import structlog

from tidemark_core.config import Modus
from tidemark_core.errors import ManifestError
from tidemark_core.reactor.discovery import ReactorProject, version_path
from tidemark_core.reactor.manifest import ManifestDocument, ManifestHandle
from tidemark_core.schemas.artifact import ArtifactId

logger = structlog.get_logger(__name__)


class ManifestIndex:
    """Owns one ManifestHandle per artifact in scope for a single run.

    Iteration follows scope order.

    Example:
        >>> index = ManifestIndex.load(select_scope(projects, Modus.PROJECT_VERSION))
        >>> index[ArtifactId.parse("org.example:core")].version.text
        '1.0.0'
    """

    def __init__(self, handles: list[ManifestHandle], projects: list[ReactorProject]) -> None:
        self._handles: dict[ArtifactId, ManifestHandle] = {}
        self._projects: dict[ArtifactId, ReactorProject] = {}
        for handle, project in zip(handles, projects, strict=True):
            if handle.artifact in self._handles:
                raise ManifestError(
                    f"Artifact {handle.artifact} is declared by more than one manifest",
                    path=project.pom_path,
                )
            self._handles[handle.artifact] = handle
            self._projects[handle.artifact] = project

    @classmethod
    def load(
        cls,
        projects: list[ReactorProject],
        modus: Modus = Modus.PROJECT_VERSION,
    ) -> ManifestIndex:
        """Read the manifest of every project in scope.

        Args:
            projects: Projects in scope, in scope order.
            modus: Decides which element holds each project's version.

        Raises:
            ManifestError: If a manifest cannot be parsed or lacks its version element.
        """
        path = version_path(modus)
        handles = [
            ManifestHandle.from_document(
                project.artifact,
                ManifestDocument.read(project.pom_path),
                path,
            )
            for project in projects
        ]
        logger.debug("manifest_index_loaded", artifacts=len(handles), modus=modus.value)
        return cls(handles, projects)

    @property
    def artifacts(self) -> list[ArtifactId]:
        """Artifacts in scope order."""
        return list(self._handles)

    def project(self, artifact: ArtifactId) -> ReactorProject:
        """Return the reactor project of an artifact."""
        return self._projects[artifact]

    def dirty(self) -> list[ManifestHandle]:
        """Handles whose document changed during the run."""
        return [handle for handle in self._handles.values() if handle.document.dirty]

    def __getitem__(self, artifact: ArtifactId) -> ManifestHandle:
        return self._handles[artifact]

    def __contains__(self, artifact: object) -> bool:
        return artifact in self._handles

    def __iter__(self) -> Iterator[ManifestHandle]:
        return iter(self._handles.values())

    def __len__(self) -> int:
        return len(self._handles)
