"""Changelog merge algorithm.

Groups an artifact's change notes by severity and inserts them as a new
version section directly under the changelog title.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date
from enum import Enum

from tidemark_core.changelog.document import (
    ChangelogDocument,
    ChangelogSubsection,
    VersionSection,
)
from tidemark_core.config import SectionHeaders
from tidemark_core.schemas.bump import SemanticBump
from tidemark_core.schemas.intent import ChangeNote

DATE_PATTERN_PLACEHOLDER = re.compile(r"\{date#(?P<pattern>[^}]+)\}")


class NoteBucket(str, Enum):
    """Changelog subsections, in rendering order."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    OTHER = "other"

    @classmethod
    def for_severity(cls, severity: SemanticBump) -> NoteBucket:
        """Bucket a severity; NONE lands in OTHER."""
        if severity is SemanticBump.NONE:
            return cls.OTHER
        return cls(severity.value)


def render_header(template: str, version: str, today: date) -> str:
    """Render a version heading template.

    Placeholders: ``{version}``, ``{date}`` (ISO date) and
    ``{date#<strftime pattern>}``.

    Example:
        >>> render_header("{version} ({date#%d/%m/%Y})", "1.2.0", date(2024, 3, 1))
        '1.2.0 (01/03/2024)'
    """
    rendered = DATE_PATTERN_PLACEHOLDER.sub(
        lambda match: today.strftime(match.group("pattern")), template
    )
    return rendered.replace("{date}", today.isoformat()).replace("{version}", version)


class ChangelogMerger:
    """Builds version sections and prepends them to changelogs.

    Args:
        header_template: Version heading template, e.g. ``"{version} - {date}"``.
        headers: Subsection labels per bucket.
        today: Date used for ``{date}`` placeholders; defaults to today.

    Example:
        >>> merger = ChangelogMerger("{version} - {date}", SectionHeaders())
        >>> merger.merge(document, "1.1.0", notes)
    """

    def __init__(
        self,
        header_template: str,
        headers: SectionHeaders,
        today: date | None = None,
    ) -> None:
        self.header_template = header_template
        self.headers = headers
        self.today = today or date.today()

    def label(self, bucket: NoteBucket) -> str:
        """Configured subsection label of a bucket."""
        return str(getattr(self.headers, bucket.value))

    def group(self, notes: Iterable[ChangeNote]) -> dict[NoteBucket, list[str]]:
        """Group note bodies per bucket, input order kept, empty bodies dropped."""
        grouped: dict[NoteBucket, list[str]] = {bucket: [] for bucket in NoteBucket}
        for note in notes:
            body = note.body.strip()
            if body:
                grouped[NoteBucket.for_severity(note.severity)].append(body)
        return grouped

    def build_section(self, version: str, notes: Iterable[ChangeNote]) -> VersionSection:
        """Build the version section for a set of notes.

        Buckets render in the order MAJOR, MINOR, PATCH, OTHER; empty
        buckets are omitted.
        """
        grouped = self.group(notes)
        subsections = [
            ChangelogSubsection(label=self.label(bucket), bodies=bodies)
            for bucket, bodies in grouped.items()
            if bodies
        ]
        heading = render_header(self.header_template, version, self.today)
        return VersionSection(heading=heading, subsections=subsections)

    def merge(
        self,
        document: ChangelogDocument,
        version: str,
        notes: Iterable[ChangeNote],
    ) -> VersionSection:
        """Prepend a new version section under the document title.

        Returns:
            The inserted section.
        """
        section = self.build_section(version, notes)
        document.prepend_after_title(section)
        return section
