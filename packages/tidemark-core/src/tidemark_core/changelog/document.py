"""Changelog document model.

A changelog is a markdown file whose first heading is ``# Changelog``.
Each release adds a level-2 version heading directly under the title,
followed by level-3 severity subsections. Everything already in the file
after the title is carried verbatim.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from tidemark_core.errors import ChangelogError

CHANGELOG_TITLE = "Changelog"
TITLE_PATTERN = re.compile(r"^#\s+(?P<title>.+?)\s*#*\s*$")


class ChangelogSubsection(BaseModel):
    """A level-3 severity subsection with its note bodies."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    label: str = Field(..., min_length=1)
    bodies: list[str] = Field(default_factory=list)

    def render(self) -> str:
        parts = [f"### {self.label}", *self.bodies]
        return "\n\n".join(parts)


class VersionSection(BaseModel):
    """A level-2 version section."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    heading: str = Field(..., min_length=1)
    subsections: list[ChangelogSubsection] = Field(default_factory=list)

    def render(self) -> str:
        parts = [f"## {self.heading}", *(s.render() for s in self.subsections)]
        return "\n\n".join(parts)


class ChangelogDocument:
    """A parsed changelog.

    Attributes:
        path: File the document belongs to.
        title: Title heading text (always ``Changelog``).
        sections: Sections added during this run, newest first.
        existing: Content that followed the title when the file was read.

    Example:
        >>> doc = ChangelogDocument.parse("# Changelog\\n\\n## 1.0.0\\n", path=Path("CHANGELOG.md"))
        >>> doc.prepend_after_title(VersionSection(heading="1.1.0"))
        >>> doc.render()
        '# Changelog\\n\\n## 1.1.0\\n\\n## 1.0.0\\n'
    """

    def __init__(self, path: Path, existing: str = "") -> None:
        self.path = path
        self.title = CHANGELOG_TITLE
        self.sections: list[VersionSection] = []
        self.existing = existing

    @classmethod
    def new(cls, path: Path) -> ChangelogDocument:
        """Create an empty changelog holding only its title."""
        return cls(path)

    @classmethod
    def parse(cls, text: str, *, path: Path) -> ChangelogDocument:
        """Parse changelog text.

        Raises:
            ChangelogError: If the first non-blank line is not ``# Changelog``.
        """
        lines = text.lstrip("\ufeff").splitlines()
        while lines and not lines[0].strip():
            lines.pop(0)
        match = TITLE_PATTERN.match(lines[0]) if lines else None
        if match is None or match.group("title") != CHANGELOG_TITLE:
            raise ChangelogError(
                f"Changelog must start with a '# {CHANGELOG_TITLE}' heading", path=path
            )
        existing = "\n".join(lines[1:]).strip("\n")
        return cls(path, existing=existing)

    @classmethod
    def read(cls, path: Path) -> ChangelogDocument:
        """Read a changelog file, or start a new one when it does not exist.

        Raises:
            ChangelogError: If the file cannot be read or has no title.
        """
        if not path.exists():
            return cls.new(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ChangelogError(
                "Unable to read changelog", path=path, internal_details=str(e)
            ) from e
        return cls.parse(text, path=path)

    @property
    def modified(self) -> bool:
        """True once a section was added."""
        return bool(self.sections)

    def prepend_after_title(self, section: VersionSection) -> None:
        """Insert a section directly under the title, before every other section."""
        self.sections.insert(0, section)

    def render(self) -> str:
        """Serialize to markdown, ending with a newline."""
        blocks = [f"# {self.title}", *(s.render() for s in self.sections)]
        if self.existing:
            blocks.append(self.existing)
        return "\n\n".join(blocks) + "\n"
