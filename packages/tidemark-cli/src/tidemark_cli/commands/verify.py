"""tidemark verify command - Check intent files cover the right modules."""

from __future__ import annotations

from pathlib import Path

import click

from tidemark_cli.options import load_config, reactor_options
from tidemark_cli.output import error, info, success

MODE_CHOICES = ["none", "at_least_one_project", "dependent_projects", "all_projects"]


@click.command()
@reactor_options
@click.option(
    "--mode",
    type=click.Choice(MODE_CHOICES, case_sensitive=False),
    default=None,
    help="Coverage rule [default: verification.mode from tidemark.yaml]",
)
@click.option(
    "--consistent",
    is_flag=True,
    default=False,
    help="Require every intent file to declare the same bump.",
)
def verify(
    root: Path,
    config_file: Path | None,
    mode: str | None,
    consistent: bool,
) -> None:
    """Verify intent files before merging a change.

    Exits with status 1 when the intent files do not satisfy the
    configured rule.

    Examples:

        tidemark verify

        tidemark verify --mode dependent_projects --consistent
    """
    from tidemark_cli.errors import EXIT_USER_ERROR, handle_tidemark_error
    from tidemark_core.config import VerificationMode
    from tidemark_core.errors import TidemarkError, VerificationError
    from tidemark_core.hooks import GitClient
    from tidemark_core.verification import Verifier
    from tidemark_core.workspace import Workspace

    config = load_config(root, config_file)
    verification = config.verification
    selected = VerificationMode(mode.lower()) if mode else verification.mode
    require_consistent = consistent or verification.consistent

    try:
        status = GitClient(root.resolve(), config.git).status()
        if status:
            info(status, style="dim")

        workspace = Workspace(root, config)
        store = workspace.store
        store.validate(workspace.scope)
        result = Verifier(workspace.scope, store, workspace.graph).verify(
            selected, consistent=require_consistent
        )
        if not result.passed:
            raise VerificationError("; ".join(result.messages))
    except VerificationError as e:
        error(f"Verification failed ({selected.value}): {e.user_message}")
        raise SystemExit(EXIT_USER_ERROR) from None
    except TidemarkError as e:
        handle_tidemark_error(e)

    success(f"Verification passed ({selected.value})")
