"""Semantic bump severity.

SemanticBump is totally ordered: NONE < PATCH < MINOR < MAJOR.
"""

from __future__ import annotations

from enum import Enum


class SemanticBump(str, Enum):
    """Semantic-version impact class of a change.

    Values:
        NONE: No version change.
        PATCH: Backwards compatible fix.
        MINOR: Backwards compatible feature.
        MAJOR: Breaking change.

    Example:
        >>> SemanticBump.max(SemanticBump.PATCH, SemanticBump.MAJOR)
        <SemanticBump.MAJOR: 'major'>
        >>> SemanticBump.parse("Minor")
        <SemanticBump.MINOR: 'minor'>
    """

    NONE = "none"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    @property
    def rank(self) -> int:
        """Position in the severity order, NONE being 0."""
        return _RANKS[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemanticBump):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, SemanticBump):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, SemanticBump):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, SemanticBump):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def max(cls, *bumps: SemanticBump) -> SemanticBump:
        """Return the strongest of the given bumps, NONE when there are none."""
        strongest = cls.NONE
        for bump in bumps:
            if bump.rank > strongest.rank:
                strongest = bump
        return strongest

    @classmethod
    def parse(cls, text: str | None) -> SemanticBump:
        """Parse a bump name case-insensitively.

        Args:
            text: Bump name such as ``"patch"`` or ``"MAJOR"``. None maps to NONE.

        Returns:
            The matching SemanticBump.

        Raises:
            ValueError: If the text names no bump.
        """
        if text is None:
            return cls.NONE
        try:
            return cls(text.strip().lower())
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown bump '{text}', expected one of: {valid}") from None


_RANKS = {
    SemanticBump.NONE: 0,
    SemanticBump.PATCH: 1,
    SemanticBump.MINOR: 2,
    SemanticBump.MAJOR: 3,
}
