"""Page content protocols for dependency injection."""
from typing import Awaitable, Protocol, Sequence, Union, runtime_checkable

from ..models.fragment import TextFragment, TextItem


@runtime_checkable
class PageFragmentSource(Protocol):
    """Protocol for styled, positioned text fragments of a page."""

    def get_fragments(
        self, page_number: int
    ) -> Union[Sequence[TextFragment], Awaitable[Sequence[TextFragment]]]:
        """Extract text fragments of a page.

        Implementations may return the fragments directly or an awaitable
        resolving to them.

        Args:
            page_number: 1-based page number.

        Returns:
            Fragments in pixel space of the page viewport.
        """
        ...


@runtime_checkable
class PageTextSource(Protocol):
    """Protocol for positioned plain text of a page."""

    def get_text_items(
        self, page_number: int
    ) -> Union[Sequence[TextItem], Awaitable[Sequence[TextItem]]]:
        """Extract text items of a page in reading order.

        Args:
            page_number: 1-based page number.

        Returns:
            Text items in pixel space of the page viewport.
        """
        ...
