"""Shared test fixtures for tidemark-cli tests.

Provides CliRunner fixtures and a factory laying out small Maven
reactors for command tests.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

POM_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <modelVersion>4.0.0</modelVersion>
    <groupId>org.example</groupId>
    <artifactId>{name}</artifactId>
    <version>{version}</version>
{body}</project>
"""


def render_pom(
    name: str,
    version: str = "1.0.0",
    *,
    modules: tuple[str, ...] = (),
    dependencies: dict[str, str] | None = None,
) -> str:
    """Render a minimal pom.xml in the org.example group."""
    body = ""
    if modules:
        body += "    <modules>\n"
        body += "".join(f"        <module>{m}</module>\n" for m in modules)
        body += "    </modules>\n"
    if dependencies:
        body += "    <dependencies>\n"
        for dependency, dependency_version in dependencies.items():
            body += (
                "        <dependency>\n"
                "            <groupId>org.example</groupId>\n"
                f"            <artifactId>{dependency}</artifactId>\n"
                f"            <version>{dependency_version}</version>\n"
                "        </dependency>\n"
            )
        body += "    </dependencies>\n"
    return POM_TEMPLATE.format(name=name, version=version, body=body)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner.

    Returns:
        CliRunner instance for testing CLI commands.
    """
    return CliRunner()


@pytest.fixture
def isolated_runner(cli_runner: CliRunner) -> Generator[CliRunner, None, None]:
    """Create a Click test runner with an isolated filesystem.

    Yields:
        CliRunner instance with isolated filesystem.
    """
    with cli_runner.isolated_filesystem():
        yield cli_runner


@pytest.fixture
def create_reactor(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture writing a reactor where ``app`` depends on ``core``.

    Returns:
        Function ``(intents=None, config=None, core_version="1.0.0") -> root``.
        ``intents`` maps file names inside ``.versioning`` to content.
    """

    def _create(
        intents: dict[str, str] | None = None,
        config: str | None = None,
        core_version: str = "1.0.0",
    ) -> Path:
        root = tmp_path / "reactor"
        (root / "core").mkdir(parents=True)
        (root / "app").mkdir()
        (root / "pom.xml").write_text(
            render_pom("parent", modules=("core", "app")), encoding="utf-8"
        )
        (root / "core" / "pom.xml").write_text(
            render_pom("core", core_version), encoding="utf-8"
        )
        (root / "app" / "pom.xml").write_text(
            render_pom("app", dependencies={"core": "1.0.0"}), encoding="utf-8"
        )
        versioning = root / ".versioning"
        versioning.mkdir()
        for file_name, content in (intents or {}).items():
            (versioning / file_name).write_text(content, encoding="utf-8")
        if config is not None:
            (root / "tidemark.yaml").write_text(config, encoding="utf-8")
        return root

    return _create


@pytest.fixture
def core_minor_intent() -> dict[str, str]:
    """Intent files bumping core MINOR."""
    return {"reader.md": "---\norg.example:core: minor\n---\nAdded a reader.\n"}
