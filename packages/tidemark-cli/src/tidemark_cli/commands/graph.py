"""tidemark graph command - Print the module dependency graph as JSON."""

from __future__ import annotations

import json
from pathlib import Path

import click

from tidemark_cli.options import load_config, reactor_options

OUTPUT_CHOICES = ["artifact_only", "folder_only", "artifact_and_folder"]


@click.command()
@reactor_options
@click.option(
    "-o",
    "--output",
    "output_format",
    type=click.Choice(OUTPUT_CHOICES, case_sensitive=False),
    default="artifact_and_folder",
    show_default=True,
    help="What each node carries.",
)
@click.option(
    "--absolute-paths",
    is_flag=True,
    default=False,
    help="Print absolute folders instead of folders relative to the root.",
)
def graph(
    root: Path,
    config_file: Path | None,
    output_format: str,
    absolute_paths: bool,
) -> None:
    """Print the dependency graph between modules in scope.

    Each module lists the reactor modules it depends on. The output is
    plain JSON so it can be piped into other tools.

    Examples:

        tidemark graph

        tidemark graph --output folder_only | jq 'keys'
    """
    from tidemark_cli.errors import handle_tidemark_error
    from tidemark_core.errors import TidemarkError
    from tidemark_core.graph import GraphOutput
    from tidemark_core.workspace import Workspace

    config = load_config(root, config_file)
    try:
        workspace = Workspace(root, config)
        exported = workspace.graph.export(
            workspace.index,
            root=workspace.root,
            output=GraphOutput(output_format.lower()),
            relative_paths=not absolute_paths,
        )
    except TidemarkError as e:
        handle_tidemark_error(e)

    click.echo(json.dumps(exported, indent=2))
