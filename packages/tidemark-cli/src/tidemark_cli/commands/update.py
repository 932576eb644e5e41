"""tidemark update command - Apply intent files to poms and changelogs."""

from __future__ import annotations

from pathlib import Path

import click

from tidemark_cli.options import load_config, reactor_options
from tidemark_cli.output import error, info, print_outcomes, success, warning

BUMP_CHOICES = ["file_based", "major", "minor", "patch"]
GIT_CHOICES = ["no_git", "stash", "commit"]
MODUS_CHOICES = ["project_version", "revision_property", "project_version_only_leafs"]


@click.command()
@reactor_options
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Show what would change without writing files.",
)
@click.option(
    "--backup",
    is_flag=True,
    default=False,
    help="Keep a .backup copy of every file before overwriting it.",
)
@click.option(
    "--bump",
    type=click.Choice(BUMP_CHOICES, case_sensitive=False),
    default=None,
    help="Force a bump on every module instead of reading intent files.",
)
@click.option(
    "--git",
    "git_mode",
    type=click.Choice(GIT_CHOICES, case_sensitive=False),
    default=None,
    help="Stage or commit the written files.",
)
@click.option(
    "--modus",
    type=click.Choice(MODUS_CHOICES, case_sensitive=False),
    default=None,
    help="Which modules are in scope and where their version lives.",
)
def update(
    root: Path,
    config_file: Path | None,
    dry_run: bool,
    backup: bool,
    bump: str | None,
    git_mode: str | None,
    modus: str | None,
) -> None:
    """Apply intent files to module versions and changelogs.

    Bumps every module named in `.versioning/*.md`, cascades a patch bump
    to every module depending on a bumped one, rewrites dependency
    versions and prepends a section to each `CHANGELOG.md`.

    Examples:

        tidemark update

        tidemark update --dry-run

        tidemark update --bump patch --git commit
    """
    from tidemark_cli.errors import EXIT_USER_ERROR, handle_tidemark_error
    from tidemark_core.errors import PropagationAbortedError, TidemarkError
    from tidemark_core.updater import UpdateRunner

    config = load_config(
        root,
        config_file,
        dry_run=True if dry_run else None,
        backup=True if backup else None,
        version_bump=bump.lower() if bump else None,
        git=git_mode.lower() if git_mode else None,
        modus=modus.lower() if modus else None,
    )

    try:
        report = UpdateRunner(root, config).run()
    except PropagationAbortedError as e:
        print_outcomes(e.result)
        error(e.user_message)
        error("Nothing was written.")
        raise SystemExit(EXIT_USER_ERROR) from None
    except TidemarkError as e:
        handle_tidemark_error(e)

    result = report.result
    print_outcomes(result)

    if report.dry_run:
        info("Dry run: no files were written.")
    for path in report.written:
        info(f"  {'would write' if report.dry_run else 'wrote'} {path}", style="dim")
    for path in report.removed_intents:
        info(f"  removed {path}", style="dim")

    if result.failed_count:
        warning(f"{result.failed_count} of {len(result.outcomes)} artifacts failed")
        raise SystemExit(EXIT_USER_ERROR)
    if result.updated_count == 0:
        info("No versions changed.")
        return
    success(f"Updated {result.updated_count} project version(s)")
