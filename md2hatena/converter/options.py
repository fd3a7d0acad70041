"""Heading depth remapping."""

from __future__ import annotations

MIN_LEVEL = 1
MAX_LEVEL = 6


class HeadingDepth:
    """Minimum output heading depth.

    ``HeadingDepth(3)`` turns ``#`` into ``<h3>`` and ``##`` into ``<h4>``.
    Levels that would go past ``<h6>`` saturate at 6.
    """

    def __init__(self, minimum: int = MIN_LEVEL) -> None:
        if not MIN_LEVEL <= minimum <= MAX_LEVEL:
            raise ValueError(
                f"heading minimum must be between {MIN_LEVEL} and {MAX_LEVEL}, got {minimum}"
            )
        self.minimum = minimum

    def apply(self, level: int) -> int:
        return max(MIN_LEVEL, min(self.minimum + level - 1, MAX_LEVEL))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, HeadingDepth) and other.minimum == self.minimum

    def __hash__(self) -> int:
        return hash(self.minimum)

    def __repr__(self) -> str:
        return f"HeadingDepth({self.minimum})"
