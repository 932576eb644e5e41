"""CLI entry point for tidemark.

This module defines the main CLI group using the LazyGroup pattern so
subcommands are only imported when invoked.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from tidemark_cli import __version__
from tidemark_cli.output import set_no_color

rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True


class LazyGroup(rclick.RichGroup):
    """Click group that loads commands lazily.

    Attributes:
        lazy_subcommands: Mapping of command names to module paths.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return the sorted names of registered and lazy commands."""
        commands = set(super().list_commands(ctx))
        commands.update(self.lazy_subcommands.keys())
        return sorted(commands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, importing it on first use."""
        cmd = super().get_command(ctx, cmd_name)  # type: ignore[arg-type]
        if cmd is not None:
            return cmd

        if cmd_name not in self.lazy_subcommands:
            return None

        module_path = self.lazy_subcommands[cmd_name]
        module_name, attr_name = module_path.rsplit(".", 1)
        mod = importlib.import_module(module_name)
        return getattr(mod, attr_name)  # type: ignore[no-any-return]


LAZY_COMMANDS = {
    "update": "tidemark_cli.commands.update.update",
    "verify": "tidemark_cli.commands.verify.verify",
    "graph": "tidemark_cli.commands.graph.graph",
}


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="tidemark")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Minimum level of structured log output.",
)
@click.option(
    "--json-logs",
    is_flag=True,
    default=False,
    help="Emit logs as JSON lines.",
)
def cli(log_level: str, json_logs: bool) -> None:
    """Tidemark - coordinated semantic versions for Maven monorepos.

    Reads intent files from `.versioning/`, bumps the versions of the
    affected modules and their dependents, and updates each module's
    `CHANGELOG.md`.

    **Commands:**

    - `tidemark update` - Apply intent files to poms and changelogs
    - `tidemark verify` - Check intent files cover the right modules
    - `tidemark graph` - Print the module dependency graph as JSON
    """
    from tidemark_core.observability import configure_logging

    configure_logging(log_level=log_level, json_format=json_logs)


if __name__ == "__main__":
    cli()
