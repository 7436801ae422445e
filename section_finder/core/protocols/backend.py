"""Similarity backend protocol."""
from typing import Protocol, runtime_checkable

from ..models.result import SearchOptions, SimilarityResult


@runtime_checkable
class SimilarityBackend(Protocol):
    """Protocol shared by the structural and text-only search backends."""

    async def find_similar_sections(
        self, options: SearchOptions
    ) -> list[SimilarityResult]:
        """Find sections similar to the selection.

        Args:
            options: Search options.

        Returns:
            Results ordered by descending score.
        """
        ...
