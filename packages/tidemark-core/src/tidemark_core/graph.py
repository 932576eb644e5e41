"""Dependency graph between reactor artifacts.

Built in a single pass over the ManifestIndex. Only references whose
target is itself in the index become edges; references to external
artifacts are inert. Cycles are tolerated.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

import structlog

from tidemark_core.reactor.index import ManifestIndex
from tidemark_core.reactor.manifest import ReferenceNode
from tidemark_core.schemas.artifact import ArtifactId

logger = structlog.get_logger(__name__)


class GraphOutput(str, Enum):
    """Shape of the exported dependency graph.

    Attributes:
        ARTIFACT_ONLY: ``{artifact: [dependency artifacts]}``
        FOLDER_ONLY: ``{folder: [dependency folders]}``
        ARTIFACT_AND_FOLDER: ``{artifact: {artifact, folder, dependencies: [...]}}``
    """

    ARTIFACT_ONLY = "artifact_only"
    FOLDER_ONLY = "folder_only"
    ARTIFACT_AND_FOLDER = "artifact_and_folder"


class DependencyGraph:
    """Forward references and reverse dependents of reactor artifacts.

    Invariant: ``b in dependents[a]`` iff ``forward_refs[b]`` holds a
    reference node targeting ``a``.

    Attributes:
        forward_refs: Artifact -> reference nodes inside its own manifest.
        dependents: Artifact -> artifacts whose manifest references it.

    Example:
        >>> graph = DependencyGraph.build(index)
        >>> graph.dependents[ArtifactId.parse("org.example:core")]
        [ArtifactId(group='org.example', name='app')]
    """

    def __init__(
        self,
        forward_refs: dict[ArtifactId, list[ReferenceNode]],
        dependents: dict[ArtifactId, list[ArtifactId]],
    ) -> None:
        self.forward_refs = forward_refs
        self.dependents = dependents
        self._incoming: dict[ArtifactId, list[ReferenceNode]] = {a: [] for a in dependents}
        for nodes in forward_refs.values():
            for node in nodes:
                self._incoming[node.target].append(node)

    @classmethod
    def build(cls, index: ManifestIndex) -> DependencyGraph:
        """Derive the graph from every manifest in the index."""
        forward_refs: dict[ArtifactId, list[ReferenceNode]] = {a: [] for a in index.artifacts}
        dependents: dict[ArtifactId, list[ArtifactId]] = {a: [] for a in index.artifacts}
        edges = 0

        for handle in index:
            for node in handle.references:
                if node.target not in index:
                    continue
                forward_refs[handle.artifact].append(node)
                if handle.artifact not in dependents[node.target]:
                    dependents[node.target].append(handle.artifact)
                    edges += 1

        logger.debug("dependency_graph_built", artifacts=len(index), edges=edges)
        return cls(forward_refs, dependents)

    def references_to(self, artifact: ArtifactId) -> list[ReferenceNode]:
        """Every reference node, in any manifest, targeting ``artifact``."""
        return list(self._incoming.get(artifact, []))

    def dependencies_of(self, artifact: ArtifactId) -> list[ArtifactId]:
        """Reactor artifacts referenced by ``artifact``'s manifest, without repeats."""
        seen: list[ArtifactId] = []
        for node in self.forward_refs.get(artifact, []):
            if node.target not in seen:
                seen.append(node.target)
        return seen

    def reachable_dependents(self, roots: list[ArtifactId]) -> list[ArtifactId]:
        """Breadth-first closure of ``roots`` over the dependents relation.

        The roots themselves are included. Each artifact appears once.
        """
        found: list[ArtifactId] = []
        queue = list(roots)
        while queue:
            artifact = queue.pop(0)
            if artifact in found:
                continue
            found.append(artifact)
            queue.extend(d for d in self.dependents.get(artifact, []) if d not in found)
        return found

    def export(
        self,
        index: ManifestIndex,
        *,
        root: Path,
        output: GraphOutput = GraphOutput.ARTIFACT_AND_FOLDER,
        relative_paths: bool = True,
    ) -> dict[str, Any]:
        """Export the graph as JSON-ready data.

        Args:
            index: Index the graph was built from, for project folders.
            root: Execution root that relative folders are computed against.
            output: Shape of the export.
            relative_paths: Folders relative to ``root`` (``"."`` for the root itself).

        Returns:
            Mapping keyed by artifact string, or by folder for FOLDER_ONLY.
        """

        def folder(artifact: ArtifactId) -> str:
            directory = index.project(artifact).directory.resolve()
            if not relative_paths:
                return str(directory)
            return Path(os.path.relpath(directory, root.resolve())).as_posix()

        exported: dict[str, Any] = {}
        for artifact in index.artifacts:
            dependencies = self.dependencies_of(artifact)
            if output is GraphOutput.ARTIFACT_ONLY:
                exported[str(artifact)] = [str(d) for d in dependencies]
            elif output is GraphOutput.FOLDER_ONLY:
                exported[folder(artifact)] = [folder(d) for d in dependencies]
            else:
                exported[str(artifact)] = {
                    "artifact": str(artifact),
                    "folder": folder(artifact),
                    "dependencies": [
                        {"artifact": str(d), "folder": folder(d)} for d in dependencies
                    ],
                }
        return exported
