"""Viewport converter protocol for dependency injection."""
from typing import Protocol, runtime_checkable

from ..models.geometry import NormalizedRect, PageViewport, Rect


@runtime_checkable
class ViewportConverter(Protocol):
    """Protocol for converting between pixel and normalized coordinates."""

    def to_normalized(
        self, rect: Rect, viewport: PageViewport, page_number: int | None = None
    ) -> NormalizedRect:
        """Convert a pixel rectangle to normalized coordinates.

        Args:
            rect: Rectangle in viewport pixels.
            viewport: Viewport the rectangle was measured on.
            page_number: Page the rectangle belongs to.

        Returns:
            Normalized rectangle.
        """
        ...

    def to_pixels(self, rect: NormalizedRect, viewport: PageViewport) -> Rect:
        """Convert a normalized rectangle to viewport pixels.

        Args:
            rect: Normalized rectangle.
            viewport: Target viewport.

        Returns:
            Rectangle in viewport pixels.
        """
        ...
