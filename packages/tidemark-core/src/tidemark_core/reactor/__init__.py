"""Maven reactor access: discovery, pom.xml documents and the manifest index."""

from __future__ import annotations

from tidemark_core.reactor.discovery import (
    ReactorProject,
    ReactorScanner,
    select_scope,
    version_path,
)
from tidemark_core.reactor.index import ManifestIndex
from tidemark_core.reactor.manifest import (
    ManifestDocument,
    ManifestHandle,
    ReferenceKind,
    ReferenceNode,
    VersionCell,
)

__all__ = [
    "ManifestDocument",
    "ManifestHandle",
    "ManifestIndex",
    "ReactorProject",
    "ReactorScanner",
    "ReferenceKind",
    "ReferenceNode",
    "VersionCell",
    "select_scope",
    "version_path",
]
