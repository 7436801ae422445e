"""Group cache protocol for dependency injection."""
from typing import Optional, Protocol, Sequence, runtime_checkable

from ..models.fragment import SectionGroup, TextFragment


@runtime_checkable
class GroupCache(Protocol):
    """Protocol for caching grouped page output across searches."""

    def fingerprint(self, page_number: int, fragments: Sequence[TextFragment]) -> str:
        """Compute a stable key for a page's fragments."""
        ...

    def get(self, key: str) -> Optional[list[SectionGroup]]:
        """Get cached groups, or None on a miss."""
        ...

    def put(self, key: str, groups: list[SectionGroup]) -> None:
        """Store groups under a key."""
        ...
