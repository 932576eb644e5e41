"""Unit tests for ArtifactId."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tidemark_core.schemas.artifact import ArtifactId


class TestArtifactId:
    """Tests for the artifact identity model."""

    def test_canonical_string(self) -> None:
        """str() renders group:name."""
        assert str(ArtifactId(group="org.example", name="core")) == "org.example:core"

    def test_parse_round_trips_canonical_form(self) -> None:
        """parse() accepts the canonical form."""
        artifact = ArtifactId.parse(" org.example:core ")
        assert artifact == ArtifactId(group="org.example", name="core")

    @pytest.mark.parametrize("text", ["core", "a:b:c", ":core", "org.example:", ""])
    def test_parse_rejects_malformed(self, text: str) -> None:
        """parse() requires exactly two non-empty parts."""
        with pytest.raises(ValueError):
            ArtifactId.parse(text)

    def test_empty_parts_rejected(self) -> None:
        """Both coordinates must be non-empty."""
        with pytest.raises(ValidationError):
            ArtifactId(group="", name="core")

    def test_structural_equality_and_hash(self) -> None:
        """Equal coordinates collapse in sets and dict keys."""
        first = ArtifactId(group="g", name="a")
        second = ArtifactId.parse("g:a")
        assert first == second
        assert len({first, second}) == 1
        assert {first: 1}[second] == 1

    def test_is_immutable(self) -> None:
        """ArtifactId is frozen."""
        artifact = ArtifactId(group="g", name="a")
        with pytest.raises(ValidationError):
            artifact.name = "b"  # type: ignore[misc]

    def test_orders_by_group_then_name(self) -> None:
        """Sorting uses group first, then name."""
        artifacts = [
            ArtifactId.parse("org.b:a"),
            ArtifactId.parse("org.a:z"),
            ArtifactId.parse("org.a:b"),
        ]
        assert [str(a) for a in sorted(artifacts)] == ["org.a:b", "org.a:z", "org.b:a"]
