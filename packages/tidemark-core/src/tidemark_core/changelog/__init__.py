"""Changelog documents and the severity-grouped merge."""

from __future__ import annotations

from tidemark_core.changelog.document import (
    ChangelogDocument,
    ChangelogSubsection,
    VersionSection,
)
from tidemark_core.changelog.files import ChangelogFiles
from tidemark_core.changelog.merger import ChangelogMerger, NoteBucket, render_header

__all__ = [
    "ChangelogDocument",
    "ChangelogFiles",
    "ChangelogMerger",
    "ChangelogSubsection",
    "NoteBucket",
    "VersionSection",
    "render_header",
]
