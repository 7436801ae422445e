"""Document protocol for dependency injection."""
from typing import Optional, Protocol, runtime_checkable

from ..models.geometry import PageViewport


@runtime_checkable
class DocumentInfo(Protocol):
    """Protocol for page count and per-page geometry of a document."""

    @property
    def total_pages(self) -> int:
        """Number of pages in the document."""
        ...

    def viewport_for(self, page_number: int) -> Optional[PageViewport]:
        """Get the viewport of a page.

        Args:
            page_number: 1-based page number.

        Returns:
            Page viewport, or None if the page has no viewport.
        """
        ...
