"""CLI error handling for tidemark-cli.

This module wraps tidemark-core exceptions into user-friendly messages
with appropriate exit codes.
"""

from __future__ import annotations

from typing import NoReturn

import click

from tidemark_cli.output import error
from tidemark_core.errors import ManifestError, TidemarkError

# Exit codes following sysexits.h convention
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1  # User error (validation, failed artifacts)
EXIT_SYSTEM_ERROR = 2  # System error (missing files, permissions)


class CLIError(click.ClickException):
    """CLI-specific exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 1).
    """

    def __init__(self, message: str, exit_code: int = EXIT_USER_ERROR) -> None:
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Display the error message using Rich formatting.

        Args:
            file: Output file (unused, for Click compatibility).
        """
        error(self.format_message())


def exit_code_for(err: TidemarkError) -> int:
    """Exit code for a core error.

    Missing or unreadable files are system errors; everything else is a
    user error.
    """
    if isinstance(err.__cause__, OSError):
        return EXIT_SYSTEM_ERROR
    if isinstance(err, ManifestError) and err.path is not None and not err.path.exists():
        return EXIT_SYSTEM_ERROR
    return EXIT_USER_ERROR


def handle_tidemark_error(err: TidemarkError) -> NoReturn:
    """Convert a core error into a CLIError.

    Raises:
        CLIError: Always, with the error's user message.
    """
    raise CLIError(err.user_message, exit_code=exit_code_for(err)) from err
