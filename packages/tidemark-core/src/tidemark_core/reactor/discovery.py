"""Reactor discovery.

Walks a Maven multi-module build from its root pom.xml and lists the
projects it contains.
"""

from __future__ import annotations

from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field

from tidemark_core.config import Modus
from tidemark_core.errors import ManifestError
from tidemark_core.reactor.manifest import ManifestDocument
from tidemark_core.schemas.artifact import ArtifactId

logger = structlog.get_logger(__name__)

POM_FILE_NAME = "pom.xml"


class ReactorProject(BaseModel):
    """One project of the reactor.

    Attributes:
        artifact: Maven coordinates of the project.
        pom_path: Absolute path of its pom.xml.
        modules: Module entries declared by the project.
        is_root: True for the execution root project.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    artifact: ArtifactId
    pom_path: Path
    modules: list[str] = Field(default_factory=list)
    is_root: bool = False

    @property
    def directory(self) -> Path:
        """Directory containing the project's pom.xml."""
        return self.pom_path.parent

    @property
    def is_leaf(self) -> bool:
        """True when the project declares no modules."""
        return not self.modules


class ReactorScanner:
    """Discovers the projects of a reactor.

    Projects are listed in pre-order: a parent before its modules, modules
    in declaration order. A pom reachable through several module entries
    is listed once.

    Example:
        >>> projects = ReactorScanner(Path("/repo")).scan()
        >>> [str(p.artifact) for p in projects]
        ['org.example:parent', 'org.example:core', 'org.example:app']
    """

    def __init__(self, root: Path) -> None:
        self.root = root.resolve()
        self._log = logger.bind(component="reactor_scanner", root=str(self.root))

    def scan(self) -> list[ReactorProject]:
        """Scan the reactor.

        Returns:
            Every project, root first.

        Raises:
            ManifestError: If a pom.xml is missing, unreadable or lacks coordinates.
        """
        root_pom = self.root / POM_FILE_NAME
        if not root_pom.exists():
            raise ManifestError("No pom.xml found at reactor root", path=root_pom)

        projects: list[ReactorProject] = []
        seen: set[Path] = set()
        self._visit(root_pom, projects, seen, is_root=True)
        self._log.debug("reactor_scanned", projects=len(projects))
        return projects

    def _visit(
        self,
        pom_path: Path,
        projects: list[ReactorProject],
        seen: set[Path],
        *,
        is_root: bool = False,
    ) -> None:
        pom_path = pom_path.resolve()
        if pom_path in seen:
            return
        seen.add(pom_path)

        document = ManifestDocument.read(pom_path)
        group = document.text("groupId") or document.text("parent", "groupId")
        name = document.text("artifactId")
        if group is None or name is None:
            raise ManifestError("Manifest lacks groupId or artifactId", path=pom_path)

        modules = [
            element.text.strip()
            for element in document.find_all("modules", "module")
            if element.text and element.text.strip()
        ]
        projects.append(
            ReactorProject(
                artifact=ArtifactId(group=group, name=name),
                pom_path=pom_path,
                modules=modules,
                is_root=is_root,
            )
        )

        for module in modules:
            self._visit(_module_pom(pom_path.parent, module), projects, seen)


def _module_pom(directory: Path, module: str) -> Path:
    candidate = directory / module
    if candidate.suffix == ".xml":
        return candidate
    return candidate / POM_FILE_NAME


def select_scope(projects: list[ReactorProject], modus: Modus) -> list[ReactorProject]:
    """Select the projects a run operates on.

    Args:
        projects: Every reactor project, root first.
        modus: Scope selection mode.

    Returns:
        Projects in scope, in reactor order.
    """
    if modus is Modus.REVISION_PROPERTY:
        return [project for project in projects if project.is_root]
    if modus is Modus.PROJECT_VERSION_ONLY_LEAFS:
        return [project for project in projects if project.is_leaf]
    return list(projects)


def version_path(modus: Modus) -> tuple[str, ...]:
    """Local-name path of the version element below <project> for a modus."""
    if modus is Modus.REVISION_PROPERTY:
        return ("properties", "revision")
    return ("version",)
