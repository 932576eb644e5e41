"""Options and configuration loading shared by tidemark commands."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

import click

if TYPE_CHECKING:
    from tidemark_core.config import TidemarkConfig

F = TypeVar("F", bound=Callable[..., Any])


def reactor_options(func: F) -> F:
    """Add ``--root`` and ``--config`` to a command."""
    func = click.option(
        "-c",
        "--config",
        "config_file",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help="Path to tidemark.yaml [default: discovered under the root]",
    )(func)
    func = click.option(
        "-r",
        "--root",
        type=click.Path(exists=True, file_okay=False, path_type=Path),
        default=Path("."),
        show_default=True,
        help="Reactor root directory (holding the root pom.xml)",
    )(func)
    return func


def load_config(root: Path, config_file: Path | None, **overrides: Any) -> TidemarkConfig:
    """Resolve tidemark.yaml for a reactor and layer flag overrides on top.

    Args:
        root: Reactor root directory.
        config_file: Explicit configuration file, if given.
        **overrides: Non-None values replace file values.

    Returns:
        TidemarkConfig for the run.

    Raises:
        CLIError: If the configuration is invalid.
    """
    from pydantic import ValidationError as PydanticValidationError

    from tidemark_cli.errors import CLIError, handle_tidemark_error
    from tidemark_core.config import ConfigResolver
    from tidemark_core.errors import TidemarkError

    try:
        config = ConfigResolver(root).load(config_file)
        return config.with_overrides(**overrides)
    except TidemarkError as e:
        handle_tidemark_error(e)
    except PydanticValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(x) for x in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise CLIError(f"Invalid option: {details}") from None
