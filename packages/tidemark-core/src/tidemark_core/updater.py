"""Update orchestration.

Runs a complete update against a reactor on disk:

1. Discover the reactor and select the scope
2. Read intent files and validate them against the scope (fail fast)
3. Load manifests and build the dependency graph
4. Propagate versions and merge changelogs in memory
5. Write manifests and changelogs, run scripts
6. Remove consumed intent files, stage and commit
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from tidemark_core.changelog.files import ChangelogFiles
from tidemark_core.changelog.merger import ChangelogMerger
from tidemark_core.config import GitMode, TidemarkConfig, VersionBumpMode
from tidemark_core.engine import PropagationEngine
from tidemark_core.hooks import GitClient, ScriptRunner
from tidemark_core.observability import get_logger
from tidemark_core.schemas.outcome import ArtifactStatus, PropagationResult
from tidemark_core.workspace import Workspace


class UpdateReport(BaseModel):
    """Outcome of an update run.

    Attributes:
        result: Per-artifact propagation outcomes.
        written: Manifest and changelog files written (or due, in a dry run).
        removed_intents: Intent files deleted after the update.
        dry_run: True when nothing was written.
        committed: True when a git commit was created.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    result: PropagationResult
    written: list[Path] = Field(default_factory=list)
    removed_intents: list[Path] = Field(default_factory=list)
    dry_run: bool = False
    committed: bool = False


class UpdateRunner:
    """Runs the update flow for one reactor.

    Args:
        root: Reactor root directory.
        config: Run configuration.
        today: Date used in changelog headings and script environments.

    Example:
        >>> report = UpdateRunner(Path("/repo"), TidemarkConfig()).run()
        >>> print(report.result.to_text())
    """

    def __init__(
        self,
        root: Path,
        config: TidemarkConfig,
        *,
        today: date | None = None,
    ) -> None:
        self.workspace = Workspace(root, config)
        self.config = config
        self.today = today or date.today()
        self.git = GitClient(self.workspace.root, config.git)
        self._log = get_logger().bind(component="updater", root=str(self.workspace.root))

    def run(self) -> UpdateReport:
        """Run the update.

        Returns:
            UpdateReport describing what changed.

        Raises:
            UnknownArtifactInIntentError: Before any mutation, for stale intents.
            PropagationAbortedError: Under the abort policy; nothing is written.
            TidemarkError: For unreadable files or failing hooks.
        """
        config = self.config
        workspace = self.workspace
        self._log.info("update_started", modus=config.modus.value, dry_run=config.dry_run)

        scope = workspace.scope
        store = workspace.store
        store.validate(scope)

        forced = config.version_bump.forced_bump
        if forced is not None:
            store = store.with_override(forced, scope)

        changelogs = ChangelogFiles(workspace.directories(), config.changelog_file)
        engine = PropagationEngine(
            workspace.index,
            workspace.graph,
            store,
            ChangelogMerger(config.version_header, config.headers, self.today),
            changelogs,
            policy=config.failure_policy,
            dependency_bump_note=config.dependency_bump_note,
        )
        result = engine.run()

        written: list[Path] = []
        for handle in workspace.index.dirty():
            if handle.document.write(dry_run=config.dry_run, backup=config.backup):
                written.append(handle.document.path)
        written.extend(changelogs.write(dry_run=config.dry_run, backup=config.backup))

        scripts = ScriptRunner(
            workspace.root,
            config.scripts,
            dry_run=config.dry_run,
            git_stash=config.git.stages_files,
            today=self.today,
        )
        for outcome in result.outcomes:
            if outcome.status is ArtifactStatus.UPDATED and outcome.change is not None:
                directory = workspace.index.project(outcome.artifact).directory
                scripts.run(directory, outcome.change)

        removed: list[Path] = []
        committed = False
        if not config.dry_run and result.updated_count > 0:
            file_based = config.version_bump is VersionBumpMode.FILE_BASED
            if file_based and result.succeeded:
                removed = self._remove_intents(store.sources)
            elif file_based:
                # Failed artifacts still need their intents on the next run
                self._log.warning(
                    "intents_kept",
                    sources=len(store.sources),
                    failed=result.failed_count,
                )
            self.git.stage([*written, *removed])
            if self.git.mode is GitMode.COMMIT:
                self.git.commit(
                    config.commit_message.replace(
                        "{number_of_projects}", str(result.updated_count)
                    )
                )
                committed = True

        self._log.info(
            "update_completed",
            updated=result.updated_count,
            failed=result.failed_count,
            written=len(written),
            removed_intents=len(removed),
        )
        return UpdateReport(
            result=result,
            written=written,
            removed_intents=removed,
            dry_run=config.dry_run,
            committed=committed,
        )

    def _remove_intents(self, sources: list[Path]) -> list[Path]:
        removed: list[Path] = []
        for path in sources:
            if path.exists():
                path.unlink()
                removed.append(path)
        return removed
