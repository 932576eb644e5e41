"""Intent file reader.

Intent files are markdown files directly inside the versioning directory.
Each starts with a YAML front matter block mapping artifacts to bumps;
the markdown after it is the change description::

    ---
    org.example:core: minor
    org.example:api: patch
    ---
    Added a streaming reader.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml

from tidemark_core.config import ArtifactIdentifier
from tidemark_core.errors import IntentFormatError
from tidemark_core.schemas.artifact import ArtifactId
from tidemark_core.schemas.bump import SemanticBump
from tidemark_core.schemas.intent import IntentRecord

logger = structlog.get_logger(__name__)

FRONT_MATTER_DELIMITER = "---"
INTENT_SUFFIX = ".md"


def split_front_matter(text: str) -> tuple[str, str] | None:
    """Split a document into its front matter and body.

    Returns:
        ``(front_matter, body)``, or None when the document has no front matter.
    """
    lines = text.lstrip("\ufeff").splitlines()
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return None
    for position, line in enumerate(lines[1:], start=1):
        if line.strip() == FRONT_MATTER_DELIMITER:
            front = "\n".join(lines[1:position])
            body = "\n".join(lines[position + 1 :]).strip()
            return front, body
    return None


class IntentReader:
    """Reads intent records from a versioning directory.

    Args:
        directory: Directory holding the intent files.
        identifier: How keys name artifacts.
        scope: Artifacts in scope, used to resolve bare names.

    Example:
        >>> reader = IntentReader(Path("/repo/.versioning"))
        >>> records = reader.read_all()
    """

    def __init__(
        self,
        directory: Path,
        *,
        identifier: ArtifactIdentifier = ArtifactIdentifier.GROUP_AND_NAME,
        scope: list[ArtifactId] | None = None,
    ) -> None:
        self.directory = directory
        self.identifier = identifier
        self._scope = scope or []
        self._log = logger.bind(component="intent_reader", directory=str(directory))

    def files(self) -> list[Path]:
        """Intent files in sorted path order, empty when the directory is missing."""
        if not self.directory.is_dir():
            self._log.warning("versioning_directory_missing")
            return []
        return sorted(
            path
            for path in self.directory.iterdir()
            if path.is_file() and path.suffix == INTENT_SUFFIX
        )

    def read_all(self) -> list[IntentRecord]:
        """Read every intent file.

        Raises:
            IntentFormatError: If any file is malformed.
        """
        records = [self.read(path) for path in self.files()]
        self._log.info("intents_read", records=len(records))
        return records

    def read(self, path: Path) -> IntentRecord:
        """Read one intent file.

        Raises:
            IntentFormatError: If the file has no front matter, the front matter
                is not a non-empty mapping, or a key or bump is invalid.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise IntentFormatError(
                "Unable to read intent file", path=path, internal_details=str(e)
            ) from e

        parts = split_front_matter(text)
        if parts is None:
            raise IntentFormatError("Missing YAML front matter", path=path)
        front, body = parts

        try:
            data: Any = yaml.safe_load(front)
        except yaml.YAMLError as e:
            raise IntentFormatError(
                "Front matter is not valid YAML", path=path, internal_details=str(e)
            ) from e

        if not isinstance(data, dict):
            raise IntentFormatError("Front matter must be a mapping of artifact to bump", path=path)
        if not data:
            raise IntentFormatError("Front matter declares no bumps", path=path)

        bumps: dict[ArtifactId, SemanticBump] = {}
        for key, value in data.items():
            artifact = self._resolve(str(key), path)
            try:
                bump = SemanticBump.parse(None if value is None else str(value))
            except ValueError as e:
                raise IntentFormatError(f"{key}: {e}", path=path) from e
            bumps[artifact] = SemanticBump.max(bumps.get(artifact, SemanticBump.NONE), bump)

        return IntentRecord(bumps=bumps, body=body, source=path)

    def _resolve(self, key: str, path: Path) -> ArtifactId:
        if ":" in key or self.identifier is ArtifactIdentifier.GROUP_AND_NAME:
            try:
                return ArtifactId.parse(key)
            except ValueError as e:
                raise IntentFormatError(str(e), path=path) from e

        matches = [artifact for artifact in self._scope if artifact.name == key]
        if len(matches) > 1:
            listed = ", ".join(str(m) for m in matches)
            raise IntentFormatError(f"'{key}' is ambiguous: {listed}", path=path)
        if matches:
            return matches[0]
        if not self._scope:
            raise IntentFormatError(f"Cannot resolve artifact name '{key}'", path=path)
        # Unresolved names fall into the root group and fail scope validation.
        return ArtifactId(group=self._scope[0].group, name=key)
