"""Per-artifact changelog files."""

from __future__ import annotations

import shutil
from pathlib import Path

import structlog

from tidemark_core.changelog.document import ChangelogDocument
from tidemark_core.errors import ChangelogError
from tidemark_core.schemas.artifact import ArtifactId

logger = structlog.get_logger(__name__)

BACKUP_SUFFIX = ".backup"


class ChangelogFiles:
    """Loads changelogs lazily, one per artifact, and writes the modified ones.

    Args:
        directories: Project directory of each artifact.
        file_name: Changelog file name inside each project directory.
    """

    def __init__(self, directories: dict[ArtifactId, Path], file_name: str = "CHANGELOG.md") -> None:
        self._directories = directories
        self.file_name = file_name
        self._documents: dict[ArtifactId, ChangelogDocument] = {}

    def path_for(self, artifact: ArtifactId) -> Path:
        return self._directories[artifact] / self.file_name

    def get(self, artifact: ArtifactId) -> ChangelogDocument:
        """Return the artifact's changelog, reading it on first access.

        Raises:
            ChangelogError: If the existing file has no ``# Changelog`` title.
        """
        document = self._documents.get(artifact)
        if document is None:
            document = ChangelogDocument.read(self.path_for(artifact))
            self._documents[artifact] = document
        return document

    def modified(self) -> list[ChangelogDocument]:
        """Changelogs that received a section during the run."""
        return [doc for doc in self._documents.values() if doc.modified]

    def write(self, *, dry_run: bool = False, backup: bool = False) -> list[Path]:
        """Write every modified changelog.

        Args:
            dry_run: Log content instead of writing.
            backup: Copy existing files to ``<name>.backup`` first.

        Returns:
            Paths written (or that would be written in a dry run).

        Raises:
            ChangelogError: If a file cannot be written.
        """
        written: list[Path] = []
        for document in self.modified():
            content = document.render()
            if dry_run:
                logger.info("changelog_dry_run", path=str(document.path), content=content)
                written.append(document.path)
                continue
            try:
                if backup and document.path.exists():
                    shutil.copyfile(
                        document.path,
                        document.path.with_name(document.path.name + BACKUP_SUFFIX),
                    )
                document.path.write_text(content, encoding="utf-8")
            except OSError as e:
                raise ChangelogError(
                    "Unable to write changelog", path=document.path, internal_details=str(e)
                ) from e
            logger.debug("changelog_written", path=str(document.path))
            written.append(document.path)
        return written
