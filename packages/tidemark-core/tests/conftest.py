"""Shared pytest fixtures for tidemark-core tests.

This module provides structlog configuration and factories that lay out
Maven reactors (poms, intent files, changelogs) under tmp_path.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import pytest
import structlog

POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


@pytest.fixture
def pom_xml() -> Callable[..., str]:
    """Factory fixture rendering a pom.xml.

    Returns:
        Function ``(name, version="1.0.0", *, group="org.example", modules=(),
        dependencies=None, parent=None, revision=None, comment=None) -> str``.
        ``dependencies`` maps ``"group:name"`` to a version.
    """

    def _render(
        name: str,
        version: str | None = "1.0.0",
        *,
        group: str | None = "org.example",
        modules: tuple[str, ...] | list[str] = (),
        dependencies: dict[str, str] | None = None,
        managed: dict[str, str] | None = None,
        plugins: dict[str, str] | None = None,
        parent: tuple[str, str] | None = None,
        revision: str | None = None,
        comment: str | None = None,
    ) -> str:
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<project xmlns="{POM_NAMESPACE}" '
            'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
            f'xsi:schemaLocation="{POM_NAMESPACE} https://maven.apache.org/xsd/maven-4.0.0.xsd">',
            "    <modelVersion>4.0.0</modelVersion>",
        ]
        if comment:
            lines.append(f"    <!-- {comment} -->")
        if parent:
            parent_id, parent_version = parent
            parent_group, parent_name = parent_id.split(":")
            lines += [
                "    <parent>",
                f"        <groupId>{parent_group}</groupId>",
                f"        <artifactId>{parent_name}</artifactId>",
                f"        <version>{parent_version}</version>",
                "    </parent>",
            ]
        if group:
            lines.append(f"    <groupId>{group}</groupId>")
        lines.append(f"    <artifactId>{name}</artifactId>")
        if version is not None:
            lines.append(f"    <version>{version}</version>")
        if modules:
            lines.append("    <modules>")
            lines += [f"        <module>{module}</module>" for module in modules]
            lines.append("    </modules>")
        if revision is not None:
            lines += [
                "    <properties>",
                f"        <revision>{revision}</revision>",
                "    </properties>",
            ]

        def _coordinates(tag: str, artifacts: dict[str, str], indent: str) -> list[str]:
            block: list[str] = []
            for artifact_id, artifact_version in artifacts.items():
                dep_group, dep_name = artifact_id.split(":")
                block += [
                    f"{indent}<{tag}>",
                    f"{indent}    <groupId>{dep_group}</groupId>",
                    f"{indent}    <artifactId>{dep_name}</artifactId>",
                    f"{indent}    <version>{artifact_version}</version>",
                    f"{indent}</{tag}>",
                ]
            return block

        if managed:
            lines += ["    <dependencyManagement>", "        <dependencies>"]
            lines += _coordinates("dependency", managed, "            ")
            lines += ["        </dependencies>", "    </dependencyManagement>"]
        if dependencies:
            lines.append("    <dependencies>")
            lines += _coordinates("dependency", dependencies, "        ")
            lines.append("    </dependencies>")
        if plugins:
            lines += ["    <build>", "        <plugins>"]
            lines += _coordinates("plugin", plugins, "            ")
            lines += ["        </plugins>", "    </build>"]
        lines.append("</project>")
        return "\n".join(lines) + "\n"

    return _render


@pytest.fixture
def intent_md() -> Callable[..., str]:
    """Factory fixture rendering an intent file.

    Returns:
        Function ``(bumps: dict[str, str], body="") -> str``.
    """

    def _render(bumps: dict[str, str], body: str = "") -> str:
        front = "\n".join(f"{artifact}: {bump}" for artifact, bump in bumps.items())
        return f"---\n{front}\n---\n{body}\n"

    return _render


@pytest.fixture
def build_reactor(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture writing a reactor under tmp_path.

    Returns:
        Function ``(poms, intents=None, changelogs=None, config=None) -> root``.
        ``poms`` and ``changelogs`` map a module directory (``"."`` for the
        root) to file content; ``intents`` maps a file name inside
        ``.versioning`` to content; ``config`` is tidemark.yaml content.
    """

    def _build(
        poms: dict[str, str],
        intents: dict[str, str] | None = None,
        changelogs: dict[str, str] | None = None,
        config: str | None = None,
    ) -> Path:
        root = tmp_path / "reactor"
        for directory, content in poms.items():
            module_dir = root / directory
            module_dir.mkdir(parents=True, exist_ok=True)
            (module_dir / "pom.xml").write_text(content, encoding="utf-8")
        if intents is not None:
            versioning = root / ".versioning"
            versioning.mkdir(parents=True, exist_ok=True)
            for file_name, content in intents.items():
                (versioning / file_name).write_text(content, encoding="utf-8")
        for directory, content in (changelogs or {}).items():
            (root / directory / "CHANGELOG.md").write_text(content, encoding="utf-8")
        if config is not None:
            (root / "tidemark.yaml").write_text(config, encoding="utf-8")
        return root

    return _build


@pytest.fixture
def root_child_reactor(
    build_reactor: Callable[..., Path],
    pom_xml: Callable[..., str],
    intent_md: Callable[..., str],
) -> Path:
    """Reactor where ``root`` aggregates and depends on ``child``.

    An intent file bumps ``child`` MINOR.

    Returns:
        Reactor root directory.
    """
    return build_reactor(
        poms={
            ".": pom_xml(
                "root",
                modules=["child"],
                dependencies={"org.example:child": "1.0.0"},
            ),
            "child": pom_xml("child"),
        },
        intents={"feature.md": intent_md({"org.example:child": "minor"}, "Added a reader.")},
    )
