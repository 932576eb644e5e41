"""Unit tests for ChangelogFiles."""

from __future__ import annotations

from pathlib import Path

import pytest

from tidemark_core.changelog.document import VersionSection
from tidemark_core.changelog.files import ChangelogFiles
from tidemark_core.errors import ChangelogError
from tidemark_core.schemas.artifact import ArtifactId

CORE = ArtifactId.parse("org.example:core")
API = ArtifactId.parse("org.example:api")


@pytest.fixture
def files(tmp_path: Path) -> ChangelogFiles:
    """Changelog files for core (existing changelog) and api (none yet)."""
    (tmp_path / "core").mkdir()
    (tmp_path / "api").mkdir()
    (tmp_path / "core" / "CHANGELOG.md").write_text(
        "# Changelog\n\n## 1.0.0\n", encoding="utf-8"
    )
    return ChangelogFiles({CORE: tmp_path / "core", API: tmp_path / "api"})


class TestChangelogFiles:
    """Tests for loading and writing changelogs."""

    def test_get_is_cached(self, files: ChangelogFiles) -> None:
        """Each artifact's document is read once."""
        assert files.get(CORE) is files.get(CORE)
        assert files.modified() == []

    def test_writes_modified_only(self, files: ChangelogFiles, tmp_path: Path) -> None:
        """Only changelogs that received a section are written."""
        files.get(CORE)
        files.get(API).prepend_after_title(VersionSection(heading="1.0.1"))

        assert files.write() == [tmp_path / "api" / "CHANGELOG.md"]
        assert (tmp_path / "api" / "CHANGELOG.md").read_text(encoding="utf-8") == (
            "# Changelog\n\n## 1.0.1\n"
        )
        assert (tmp_path / "core" / "CHANGELOG.md").read_text(encoding="utf-8") == (
            "# Changelog\n\n## 1.0.0\n"
        )

    def test_dry_run(self, files: ChangelogFiles, tmp_path: Path) -> None:
        """A dry run reports the path without creating the file."""
        files.get(API).prepend_after_title(VersionSection(heading="1.0.1"))
        assert files.write(dry_run=True) == [tmp_path / "api" / "CHANGELOG.md"]
        assert not (tmp_path / "api" / "CHANGELOG.md").exists()

    def test_backup(self, files: ChangelogFiles, tmp_path: Path) -> None:
        """Existing changelogs are copied before being overwritten."""
        files.get(CORE).prepend_after_title(VersionSection(heading="1.1.0"))
        files.write(backup=True)
        assert (tmp_path / "core" / "CHANGELOG.md.backup").read_text(encoding="utf-8") == (
            "# Changelog\n\n## 1.0.0\n"
        )

    def test_custom_file_name(self, tmp_path: Path) -> None:
        """The file name inside each directory is configurable."""
        files = ChangelogFiles({CORE: tmp_path}, file_name="HISTORY.md")
        assert files.path_for(CORE) == tmp_path / "HISTORY.md"

    def test_untitled_changelog(self, tmp_path: Path) -> None:
        """An existing changelog without a title is rejected on load."""
        (tmp_path / "CHANGELOG.md").write_text("Some notes\n", encoding="utf-8")
        with pytest.raises(ChangelogError):
            ChangelogFiles({CORE: tmp_path}).get(CORE)
