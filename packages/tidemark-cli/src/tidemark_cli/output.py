"""Rich console output utilities for tidemark-cli.

This module provides formatted console output with Rich,
supporting colored success/error/warning messages and
respecting NO_COLOR environment variable.
"""

from __future__ import annotations

import json
import os
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from tidemark_core.schemas.outcome import ArtifactStatus, PropagationResult

_force_no_color = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False) -> Console:
    """Create a Rich Console instance with appropriate color settings.

    Args:
        no_color: If True, disable colored output. Also respects NO_COLOR env var.

    Returns:
        Configured Console instance.
    """
    force_terminal = None
    if no_color or _force_no_color:
        force_terminal = False
    return Console(force_terminal=force_terminal, no_color=no_color or _force_no_color)


console = create_console()


def success(message: str, **kwargs: Any) -> None:
    """Print a success message with green checkmark."""
    console.print(f"[green]✓[/green] {message}", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print an error message with red X."""
    console.print(f"[red]✗[/red] {message}", **kwargs)


def warning(message: str, **kwargs: Any) -> None:
    """Print a warning message with yellow triangle."""
    console.print(f"[yellow]⚠[/yellow] {message}", **kwargs)


def info(message: str, **kwargs: Any) -> None:
    """Print an informational message."""
    console.print(message, **kwargs)


def print_json(data: dict[str, Any], **kwargs: Any) -> None:
    """Print JSON data with syntax highlighting.

    Args:
        data: Dictionary to print as JSON.
        **kwargs: Additional arguments passed to console.print_json().
    """
    console.print_json(json.dumps(data), **kwargs)


def set_no_color(no_color: bool) -> None:
    """Update the global console to enable/disable colors.

    Note:
        This updates the module-level console instance.
    """
    global console
    console = create_console(no_color=no_color)


_STATUS_COLORS = {
    ArtifactStatus.UPDATED: "green",
    ArtifactStatus.SKIPPED: "dim",
    ArtifactStatus.FAILED: "red",
}


def print_outcomes(result: PropagationResult) -> None:
    """Print per-artifact outcomes as a Rich table, then reference mismatches.

    Args:
        result: Propagation result to display.
    """
    table = Table(show_header=True, header_style="bold")
    table.add_column("Artifact", min_width=20)
    table.add_column("Status")
    table.add_column("Bump")
    table.add_column("Before")
    table.add_column("After")
    table.add_column("Reason")

    for outcome in result.outcomes:
        color = _STATUS_COLORS[outcome.status]
        bump = "-"
        if outcome.bump is not None:
            bump = f"{outcome.bump.severity.value} ({outcome.bump.origin.value})"
        table.add_row(
            str(outcome.artifact),
            Text(outcome.status.value, style=color),
            bump,
            outcome.change.before if outcome.change else "-",
            outcome.change.after if outcome.change else "-",
            outcome.reason or "-",
        )

    console.print(table)

    for mismatch in result.mismatches:
        warning(
            f"{mismatch.owner}: reference to {mismatch.target} holds "
            f"{mismatch.found}, expected {mismatch.expected}; left unchanged"
        )

    console.print(
        f"{result.updated_count} updated, {result.skipped_count} skipped, "
        f"{result.failed_count} failed of {len(result.outcomes)} artifacts"
    )
