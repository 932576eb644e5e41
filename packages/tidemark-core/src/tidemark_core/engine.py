"""Version propagation engine.

Applies explicit bumps from the intent store, then cascades PATCH bumps
breadth-first through every artifact that depends on an updated one.
Each artifact is finalized at most once per run, so cycles terminate.
"""

from __future__ import annotations

from collections import deque

import structlog

from tidemark_core.changelog.files import ChangelogFiles
from tidemark_core.changelog.merger import ChangelogMerger
from tidemark_core.config import DEFAULT_DEPENDENCY_BUMP_NOTE, FailurePolicy
from tidemark_core.errors import MalformedVersionError, PropagationAbortedError
from tidemark_core.graph import DependencyGraph
from tidemark_core.intents.store import IntentStore
from tidemark_core.reactor.index import ManifestIndex
from tidemark_core.schemas.artifact import ArtifactId
from tidemark_core.schemas.bump import SemanticBump
from tidemark_core.schemas.intent import ChangeNote
from tidemark_core.schemas.outcome import (
    ArtifactOutcome,
    ArtifactStatus,
    BumpOrigin,
    BumpRecord,
    PropagationResult,
    ReferenceMismatch,
    VersionChange,
)
from tidemark_core.schemas.version import increment

logger = structlog.get_logger(__name__)


class PropagationEngine:
    """Computes and applies the new version of every affected artifact.

    Manifests in the index are mutated in place; changelog documents get
    a new section per updated artifact. Nothing is written to disk.

    Args:
        index: Manifests in scope, in scope order.
        graph: Dependency graph built from ``index``.
        store: Validated intent store.
        merger: Builds changelog sections.
        changelogs: Changelog documents per artifact.
        policy: Reaction to a malformed version.
        dependency_bump_note: Note recorded for cascaded updates.

    Example:
        >>> engine = PropagationEngine(index, graph, store, merger, changelogs)
        >>> result = engine.run()
        >>> result.changes[ArtifactId.parse("org.example:app")]
        VersionChange(before='1.0.0', after='1.0.1')
    """

    def __init__(
        self,
        index: ManifestIndex,
        graph: DependencyGraph,
        store: IntentStore,
        merger: ChangelogMerger,
        changelogs: ChangelogFiles,
        *,
        policy: FailurePolicy = FailurePolicy.SKIP_ARTIFACT,
        dependency_bump_note: str = DEFAULT_DEPENDENCY_BUMP_NOTE,
    ) -> None:
        self.index = index
        self.graph = graph
        self.store = store
        self.merger = merger
        self.changelogs = changelogs
        self.policy = policy
        self.dependency_bump_note = dependency_bump_note
        self._log = logger.bind(component="propagation_engine")

        self._updated: set[ArtifactId] = set()
        self._failed: set[ArtifactId] = set()
        self._queue: deque[ArtifactId] = deque()
        self._outcomes: list[ArtifactOutcome] = []
        self._mismatches: list[ReferenceMismatch] = []

    def run(self) -> PropagationResult:
        """Run the seed pass and the cascade to completion.

        Returns:
            Per-artifact outcomes and skipped reference rewrites.

        Raises:
            PropagationAbortedError: Under the abort policy, on the first
                malformed version. Carries the partial result.
            ChangelogError: If a changelog cannot be read.
        """
        self._reset()

        for artifact in self.index.artifacts:
            severity = self.store.bump_for(artifact)
            if severity is SemanticBump.NONE:
                continue
            # Forced bumps can reach artifacts no intent record describes
            notes = self.store.notes_for(artifact) or [self._dependency_note(artifact)]
            self._finalize(artifact, severity, BumpOrigin.EXPLICIT, notes)

        while self._queue:
            artifact = self._queue.popleft()
            if artifact in self._updated or artifact in self._failed:
                continue
            self._finalize(
                artifact,
                SemanticBump.PATCH,
                BumpOrigin.CASCADED,
                [self._dependency_note(artifact)],
            )

        result = self._result()
        self._log.info(
            "propagation_completed",
            updated=result.updated_count,
            skipped=result.skipped_count,
            failed=result.failed_count,
            mismatches=len(result.mismatches),
        )
        return result

    def _dependency_note(self, artifact: ArtifactId) -> ChangeNote:
        return ChangeNote(
            artifact=artifact,
            severity=SemanticBump.NONE,
            body=self.dependency_bump_note,
        )

    def _reset(self) -> None:
        self._updated.clear()
        self._failed.clear()
        self._queue.clear()
        self._outcomes.clear()
        self._mismatches.clear()

    def _finalize(
        self,
        artifact: ArtifactId,
        severity: SemanticBump,
        origin: BumpOrigin,
        notes: list[ChangeNote],
    ) -> None:
        handle = self.index[artifact]
        bump = BumpRecord(artifact=artifact, severity=severity, origin=origin)
        before = handle.version.text

        try:
            after = increment(before, severity)
        except MalformedVersionError as e:
            self._fail(artifact, bump, e.for_artifact(artifact))
            return

        changelog = self.changelogs.get(artifact)

        handle.version.text = after
        self._updated.add(artifact)
        change = VersionChange(before=before, after=after)
        self._outcomes.append(
            ArtifactOutcome(
                artifact=artifact,
                status=ArtifactStatus.UPDATED,
                bump=bump,
                change=change,
            )
        )
        self._log.info(
            "artifact_updated",
            artifact=str(artifact),
            before=before,
            after=after,
            severity=severity.value,
            origin=origin.value,
        )

        self.merger.merge(changelog, after, notes)
        self._rewrite_references(artifact, change)

        for dependent in self.graph.dependents.get(artifact, []):
            if dependent not in self._updated:
                self._queue.append(dependent)

    def _rewrite_references(self, artifact: ArtifactId, change: VersionChange) -> None:
        for node in self.graph.references_to(artifact):
            if node.rewrite(change.before, change.after):
                self._log.debug(
                    "reference_rewritten",
                    owner=str(node.owner),
                    target=str(artifact),
                    version=change.after,
                )
                continue
            mismatch = ReferenceMismatch(
                owner=node.owner,
                target=artifact,
                expected=change.before,
                found=node.cell.text,
            )
            self._mismatches.append(mismatch)
            self._log.warning(
                "reference_version_mismatch",
                owner=str(node.owner),
                target=str(artifact),
                expected=change.before,
                found=node.cell.text,
            )

    def _fail(self, artifact: ArtifactId, bump: BumpRecord, error: MalformedVersionError) -> None:
        self._failed.add(artifact)
        self._outcomes.append(
            ArtifactOutcome(
                artifact=artifact,
                status=ArtifactStatus.FAILED,
                bump=bump,
                reason=error.user_message,
            )
        )
        self._log.error(
            "artifact_failed",
            artifact=str(artifact),
            version=error.version,
            policy=self.policy.value,
        )
        if self.policy is FailurePolicy.ABORT:
            raise PropagationAbortedError(self._result(aborted=True), error)

    def _result(self, *, aborted: bool = False) -> PropagationResult:
        finalized = self._updated | self._failed
        skipped = [
            ArtifactOutcome(artifact=artifact, status=ArtifactStatus.SKIPPED)
            for artifact in self.index.artifacts
            if artifact not in finalized
        ]
        return PropagationResult(
            outcomes=[*self._outcomes, *skipped],
            mismatches=list(self._mismatches),
            aborted=aborted,
        )
