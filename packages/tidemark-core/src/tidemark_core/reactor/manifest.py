"""pom.xml documents and their version cells.

This module provides:
- ManifestDocument: A parsed, mutable pom.xml that round-trips comments and prefixes
- VersionCell: A mutable text cell holding a version string
- ReferenceNode: A groupId/artifactId/version triple pointing at another artifact
- ManifestHandle: One module's document, version cell and outgoing references
"""

from __future__ import annotations

import io
import re
import shutil
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from pathlib import Path

import structlog

from tidemark_core.errors import ManifestError
from tidemark_core.schemas.artifact import ArtifactId
from tidemark_core.schemas.version import SemanticVersion

logger = structlog.get_logger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'
BACKUP_SUFFIX = ".backup"

# Leading XML declaration, then comments, processing instructions and doctype
XML_DECLARATION_PATTERN = re.compile(r"\s*<\?xml\s.*?\?>", re.DOTALL)
PROLOG_ITEM_PATTERN = re.compile(r"\s*(?:<!--.*?-->|<\?.*?\?>|<!DOCTYPE[^>]*>)", re.DOTALL)


class ReferenceKind(str, Enum):
    """Where in a pom.xml a reference node lives."""

    DEPENDENCY = "dependency"
    MANAGED_DEPENDENCY = "managed_dependency"
    PLUGIN = "plugin"
    MANAGED_PLUGIN = "managed_plugin"
    PARENT = "parent"


# Element paths (local names, below <project>) of each reference container
REFERENCE_PATHS: tuple[tuple[ReferenceKind, tuple[str, ...]], ...] = (
    (ReferenceKind.DEPENDENCY, ("dependencies", "dependency")),
    (ReferenceKind.MANAGED_DEPENDENCY, ("dependencyManagement", "dependencies", "dependency")),
    (ReferenceKind.PLUGIN, ("build", "plugins", "plugin")),
    (ReferenceKind.MANAGED_PLUGIN, ("build", "pluginManagement", "plugins", "plugin")),
    (ReferenceKind.PARENT, ("parent",)),
)

PROJECT_GROUP_PLACEHOLDER = "${project.groupId}"


def local_name(tag: object) -> str:
    """Strip the ``{namespace}`` prefix from an element tag."""
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


class ManifestDocument:
    """A parsed pom.xml.

    Comments and processing instructions are kept, both inside the root
    element and in the prolog before it. Namespace prefixes are restored on
    serialization. Mutations go through VersionCell, which marks the
    document dirty.

    Attributes:
        path: File the document was read from.
        root: The <project> element.
        prolog: Comments, processing instructions and doctype before <project>.
        dirty: True once any cell text changed.
    """

    def __init__(
        self,
        path: Path,
        root: ET.Element,
        namespaces: list[tuple[str, str]],
        prolog: str = "",
    ) -> None:
        self.path = path
        self.root = root
        self.namespaces = namespaces
        self.prolog = prolog
        self.dirty = False

    @classmethod
    def read(cls, path: Path) -> ManifestDocument:
        """Parse a pom.xml file.

        Raises:
            ManifestError: If the file cannot be read or is not well-formed XML.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ManifestError(
                "Unable to read manifest", path=path, internal_details=str(e)
            ) from e
        return cls.parse(text, path=path)

    @classmethod
    def parse(cls, text: str, *, path: Path) -> ManifestDocument:
        """Parse pom.xml text.

        Raises:
            ManifestError: If the text is not well-formed XML.
        """
        try:
            namespaces = [
                ns for _, ns in ET.iterparse(io.StringIO(text), events=("start-ns",))
            ]
            parser = ET.XMLParser(
                target=ET.TreeBuilder(insert_comments=True, insert_pis=True)
            )
            parser.feed(text)
            root = parser.close()
        except ET.ParseError as e:
            raise ManifestError(
                "Manifest is not well-formed XML", path=path, internal_details=str(e)
            ) from e
        if local_name(root.tag) != "project":
            raise ManifestError("Manifest root element must be <project>", path=path)
        return cls(path, root, namespaces, _prolog(text))

    def child(self, element: ET.Element, name: str) -> ET.Element | None:
        """Return the first child of ``element`` with the given local name."""
        for candidate in element:
            if local_name(candidate.tag) == name:
                return candidate
        return None

    def children(self, element: ET.Element, name: str) -> Iterator[ET.Element]:
        """Yield every child of ``element`` with the given local name."""
        for candidate in element:
            if local_name(candidate.tag) == name:
                yield candidate

    def find(self, *names: str) -> ET.Element | None:
        """Walk a path of local names from <project>."""
        element: ET.Element | None = self.root
        for name in names:
            if element is None:
                return None
            element = self.child(element, name)
        return element

    def find_all(self, *names: str) -> Iterator[ET.Element]:
        """Yield every element matching a path of local names from <project>."""
        parent = self.find(*names[:-1])
        if parent is not None:
            yield from self.children(parent, names[-1])

    def text(self, *names: str) -> str | None:
        """Return the stripped text at a path, None when absent or empty."""
        element = self.find(*names)
        if element is None or element.text is None:
            return None
        return element.text.strip() or None

    def render(self) -> str:
        """Serialize the document with an XML declaration."""
        with _registered_namespaces(self.namespaces):
            body = ET.tostring(self.root, encoding="unicode")
        prolog = f"{self.prolog}\n" if self.prolog else ""
        return f"{XML_DECLARATION}{prolog}{body}\n"

    def write(self, *, dry_run: bool = False, backup: bool = False) -> bool:
        """Write the document back to its file if it changed.

        Args:
            dry_run: Log the content instead of writing it.
            backup: Copy the previous file to ``<name>.backup`` first.

        Returns:
            True if the document was dirty (and written unless dry run).

        Raises:
            ManifestError: If the file cannot be written.
        """
        if not self.dirty:
            return False
        content = self.render()
        if dry_run:
            logger.info("manifest_dry_run", path=str(self.path), content=content)
            return True
        try:
            if backup and self.path.exists():
                shutil.copyfile(self.path, self.path.with_name(self.path.name + BACKUP_SUFFIX))
            self.path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise ManifestError(
                "Unable to write manifest", path=self.path, internal_details=str(e)
            ) from e
        logger.debug("manifest_written", path=str(self.path))
        self.dirty = False
        return True


class VersionCell:
    """Mutable version text held by one element of a document."""

    def __init__(self, document: ManifestDocument, element: ET.Element) -> None:
        self._document = document
        self._element = element

    @property
    def text(self) -> str:
        return (self._element.text or "").strip()

    @text.setter
    def text(self, value: str) -> None:
        if value == self.text:
            return
        self._element.text = value
        self._document.dirty = True

    def __repr__(self) -> str:
        return f"VersionCell({self.text!r})"


class ReferenceNode:
    """A reference from one manifest to another artifact's version.

    Attributes:
        owner: Artifact whose manifest contains the reference.
        target: Artifact the reference points at.
        kind: Container the reference was found in.
        cell: Version text of the reference.
    """

    def __init__(
        self,
        owner: ArtifactId,
        target: ArtifactId,
        kind: ReferenceKind,
        cell: VersionCell,
    ) -> None:
        self.owner = owner
        self.target = target
        self.kind = kind
        self.cell = cell

    def rewrite(self, before: str, after: str) -> bool:
        """Replace the version with ``after`` only if it currently equals ``before``.

        Returns:
            True if the reference was rewritten.
        """
        if self.cell.text != before:
            return False
        self.cell.text = after
        return True

    def __repr__(self) -> str:
        return f"ReferenceNode({self.owner} -> {self.target}@{self.cell.text}, {self.kind.value})"


class ManifestHandle:
    """One module's manifest: its document, version cell and references.

    Attributes:
        artifact: Identity of the module.
        document: Parsed pom.xml.
        version: The cell holding the module's own version.
        references: Reference nodes to other artifacts, in document order.
    """

    def __init__(
        self,
        artifact: ArtifactId,
        document: ManifestDocument,
        version: VersionCell,
        references: list[ReferenceNode],
    ) -> None:
        self.artifact = artifact
        self.document = document
        self.version = version
        self.references = references

    @classmethod
    def from_document(
        cls,
        artifact: ArtifactId,
        document: ManifestDocument,
        version_path: tuple[str, ...],
    ) -> ManifestHandle:
        """Locate the version cell and reference nodes of a document.

        Args:
            artifact: Identity of the module.
            document: Parsed pom.xml.
            version_path: Local-name path of the version element below <project>.

        Raises:
            ManifestError: If the version element does not exist.
        """
        element = document.find(*version_path)
        if element is None:
            raise ManifestError(
                f"Unable to find project version on the path {'/'.join(('project', *version_path))}",
                path=document.path,
            )
        version = VersionCell(document, element)
        references = list(_collect_references(artifact, document))
        return cls(artifact, document, version, references)

    def __repr__(self) -> str:
        return f"ManifestHandle({self.artifact}@{self.version.text})"


def _collect_references(owner: ArtifactId, document: ManifestDocument) -> Iterator[ReferenceNode]:
    for kind, path in REFERENCE_PATHS:
        for element in document.find_all(*path):
            group = _child_text(document, element, "groupId")
            name = _child_text(document, element, "artifactId")
            version_element = document.child(element, "version")
            if group is None or name is None or version_element is None:
                continue
            if group == PROJECT_GROUP_PLACEHOLDER:
                group = owner.group
            cell = VersionCell(document, version_element)
            if not SemanticVersion.is_valid(cell.text):
                continue
            try:
                target = ArtifactId(group=group, name=name)
            except ValueError:
                continue
            yield ReferenceNode(owner, target, kind, cell)


def _child_text(document: ManifestDocument, element: ET.Element, name: str) -> str | None:
    child = document.child(element, name)
    if child is None or child.text is None:
        return None
    return child.text.strip() or None


def _prolog(text: str) -> str:
    """Return the markup between the XML declaration and the root start tag."""
    declaration = XML_DECLARATION_PATTERN.match(text)
    start = declaration.end() if declaration else 0
    end = start
    while (item := PROLOG_ITEM_PATTERN.match(text, end)) is not None:
        end = item.end()
    return text[start:end].strip()


@contextmanager
def _registered_namespaces(namespaces: list[tuple[str, str]]) -> Iterator[None]:
    """Register a document's prefixes for one serialization.

    ElementTree keeps prefixes in a process-wide map; it is restored on exit
    so one document's prefixes never apply to the next.
    """
    saved = dict(ET._namespace_map)
    try:
        for prefix, uri in namespaces:
            try:
                ET.register_namespace(prefix, uri)
            except ValueError:
                logger.debug("namespace_not_registered", prefix=prefix, uri=uri)
        yield
    finally:
        ET._namespace_map.clear()
        ET._namespace_map.update(saved)
