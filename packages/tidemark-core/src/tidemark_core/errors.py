"""Custom exception hierarchy for tidemark-core.

This module defines the exception classes used throughout tidemark:
- TidemarkError: Base exception for all tidemark errors
- UnknownArtifactInIntentError: Intent names an artifact outside the reactor
- MalformedVersionError: A version string is not a semantic version
- PropagationAbortedError: The abort failure policy stopped a run

User-facing messages are safe to display; technical details are logged
internally via structlog.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from tidemark_core.schemas.artifact import ArtifactId
    from tidemark_core.schemas.outcome import PropagationResult

logger = structlog.get_logger(__name__)


class TidemarkError(Exception):
    """Base exception for tidemark.

    All tidemark exceptions inherit from this class. User-facing messages
    are safe to display; technical details are logged internally.

    Args:
        user_message: Safe message to display to the user.
        internal_details: Optional technical details for logging only.

    Example:
        >>> raise TidemarkError(
        ...     "Update failed",
        ...     internal_details="pom.xml at /repo/core could not be parsed",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details

        if internal_details:
            logger.error(
                "tidemark_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class UnknownArtifactInIntentError(TidemarkError):
    """Raised when intent records reference artifacts outside the run scope.

    Raised before any manifest is touched, so a stale intent file never
    results in a partial update.

    Attributes:
        unknown: Sorted artifact identities that are not in scope.
    """

    def __init__(
        self,
        unknown: Iterable[ArtifactId],
        *,
        internal_details: str | None = None,
    ) -> None:
        self.unknown = sorted(unknown)
        listed = ", ".join(str(artifact) for artifact in self.unknown)
        super().__init__(
            f"Intent records reference artifacts that are not part of the reactor: {listed}",
            internal_details=internal_details,
        )


class MalformedVersionError(TidemarkError):
    """Raised when a version string cannot be parsed as a semantic version.

    Attributes:
        version: The offending version text.
        artifact: Artifact owning the version, when known.
    """

    def __init__(
        self,
        version: str,
        *,
        artifact: ArtifactId | None = None,
        internal_details: str | None = None,
    ) -> None:
        self.version = version
        self.artifact = artifact
        message = f"'{version}' is not a valid semantic version"
        if artifact is not None:
            message = f"{artifact}: {message}"
        super().__init__(message, internal_details=internal_details)

    def for_artifact(self, artifact: ArtifactId) -> MalformedVersionError:
        """Return a copy of this error tagged with the owning artifact."""
        return MalformedVersionError(self.version, artifact=artifact)


class PropagationAbortedError(TidemarkError):
    """Raised when the abort failure policy stops a propagation run.

    The partial result is attached so callers can report what was
    processed before the failure. Nothing is written to disk.

    Attributes:
        result: Outcomes recorded up to and including the failure.
        cause: The per-artifact error that triggered the abort.
    """

    def __init__(
        self,
        result: PropagationResult,
        cause: MalformedVersionError,
    ) -> None:
        self.result = result
        self.cause = cause
        super().__init__(f"Update aborted: {cause.user_message}")


class IntentFormatError(TidemarkError):
    """Raised when an intent file cannot be read.

    Attributes:
        path: Intent file that failed to parse.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path,
        internal_details: str | None = None,
    ) -> None:
        self.path = path
        super().__init__(f"{path.name}: {message}", internal_details=internal_details)


class ManifestError(TidemarkError):
    """Raised when a pom.xml cannot be read, navigated or written.

    Attributes:
        path: Manifest file involved, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        internal_details: str | None = None,
    ) -> None:
        self.path = path
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message, internal_details=internal_details)


class ChangelogError(TidemarkError):
    """Raised when a changelog file is not in the expected layout.

    Attributes:
        path: Changelog file involved, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        internal_details: str | None = None,
    ) -> None:
        self.path = path
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message, internal_details=internal_details)


class ConfigurationError(TidemarkError):
    """Raised when tidemark.yaml cannot be parsed or validated.

    Attributes:
        file_path: Path to the configuration file, if any.
        field_path: Dotted path to the invalid field, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        file_path: Path | None = None,
        field_path: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        self.file_path = file_path
        self.field_path = field_path

        parts: list[str] = []
        if file_path is not None:
            parts.append(f"in {file_path}")
        if field_path:
            parts.append(f"at '{field_path}'")
        full_message = f"{message} ({', '.join(parts)})" if parts else message

        super().__init__(full_message, internal_details=internal_details)


class HookError(TidemarkError):
    """Raised when a post-update script or git command fails.

    Attributes:
        command: The command line that failed.
        returncode: Exit status of the command.
    """

    def __init__(
        self,
        command: list[str],
        returncode: int,
        *,
        internal_details: str | None = None,
    ) -> None:
        self.command = command
        self.returncode = returncode
        super().__init__(
            f"Command '{' '.join(command)}' exited with status {returncode}",
            internal_details=internal_details,
        )


class VerificationError(TidemarkError):
    """Raised when intent records do not satisfy the verification rules."""

    pass
