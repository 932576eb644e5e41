"""Intent verification.

Checks that the intent records present in a working tree cover the
projects they should, before a change is merged.
"""

from __future__ import annotations

import structlog
from pydantic import BaseModel, ConfigDict, Field

from tidemark_core.config import VerificationMode
from tidemark_core.graph import DependencyGraph
from tidemark_core.intents.store import IntentStore
from tidemark_core.schemas.artifact import ArtifactId

logger = structlog.get_logger(__name__)


class VerificationResult(BaseModel):
    """Outcome of a verification.

    Attributes:
        mode: Rule that was applied.
        passed: True when every rule held.
        expected: Artifacts that needed an intent record.
        missing: Expected artifacts without one.
        unexpected: Artifacts with an intent record that were not expected.
        messages: Human-readable failure descriptions.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    mode: VerificationMode
    passed: bool
    expected: list[ArtifactId] = Field(default_factory=list)
    missing: list[ArtifactId] = Field(default_factory=list)
    unexpected: list[ArtifactId] = Field(default_factory=list)
    messages: list[str] = Field(default_factory=list)


class Verifier:
    """Applies a VerificationMode to an intent store.

    Args:
        scope: Artifacts in scope, in scope order.
        store: Intent store read from the versioning directory.
        graph: Dependency graph of the scope.

    Example:
        >>> result = Verifier(scope, store, graph).verify(VerificationMode.DEPENDENT_PROJECTS)
        >>> result.passed
        True
    """

    def __init__(
        self,
        scope: list[ArtifactId],
        store: IntentStore,
        graph: DependencyGraph,
    ) -> None:
        self.scope = scope
        self.store = store
        self.graph = graph

    def verify(self, mode: VerificationMode, *, consistent: bool = False) -> VerificationResult:
        """Check the store against ``mode``.

        Args:
            mode: Coverage rule.
            consistent: Also require every declared bump to be identical.

        Returns:
            VerificationResult with the offending artifacts listed.
        """
        found = self.store.artifacts
        expected: list[ArtifactId] = []
        missing: list[ArtifactId] = []
        unexpected: list[ArtifactId] = []
        messages: list[str] = []

        if mode is VerificationMode.AT_LEAST_ONE_PROJECT:
            if self.store.is_empty:
                messages.append("No intent records found; at least one project must be versioned")
        elif mode is VerificationMode.DEPENDENT_PROJECTS:
            roots = [a for a in self.scope if a in found]
            expected = self.graph.reachable_dependents(roots)
            missing = [a for a in expected if a not in found]
            if missing:
                listed = ", ".join(str(a) for a in missing)
                messages.append(f"Dependent projects without intent records: {listed}")
        elif mode is VerificationMode.ALL_PROJECTS:
            expected = list(self.scope)
            missing = [a for a in expected if a not in found]
            unexpected = sorted(a for a in found if a not in set(expected))
            if missing:
                listed = ", ".join(str(a) for a in missing)
                messages.append(f"Projects without intent records: {listed}")
            if unexpected:
                listed = ", ".join(str(a) for a in unexpected)
                messages.append(f"Intent records for unknown projects: {listed}")

        if consistent and not self.store.is_empty:
            bumps = self.store.distinct_bumps()
            if len(bumps) > 1:
                listed = ", ".join(sorted(b.value for b in bumps))
                messages.append(f"Intent records declare inconsistent bumps: {listed}")

        result = VerificationResult(
            mode=mode,
            passed=not messages,
            expected=expected,
            missing=missing,
            unexpected=unexpected,
            messages=messages,
        )
        logger.info(
            "verification_completed",
            mode=mode.value,
            passed=result.passed,
            missing=len(missing),
        )
        return result
