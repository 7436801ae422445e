"""Reference locator - finds the section group under a selection."""

import logging
from typing import Optional, Sequence

import numpy as np

from ..models.fragment import SectionGroup
from ..models.geometry import NormalizedPosition, PageViewport, Rect
from ..protocols.viewport import ViewportConverter

logger = logging.getLogger(__name__)


def iou_against(target: Rect, candidates: Sequence[Rect]) -> np.ndarray:
    """IoU of ``target`` with every candidate rectangle."""
    if not candidates:
        return np.zeros(0)

    edges = np.array([(r.left, r.top, r.right, r.bottom) for r in candidates], dtype=float)

    overlap_x = np.clip(
        np.minimum(edges[:, 2], target.right) - np.maximum(edges[:, 0], target.left), 0, None
    )
    overlap_y = np.clip(
        np.minimum(edges[:, 3], target.bottom) - np.maximum(edges[:, 1], target.top), 0, None
    )
    overlap = overlap_x * overlap_y

    areas = (edges[:, 2] - edges[:, 0]) * (edges[:, 3] - edges[:, 1])
    union = areas + target.area - overlap

    return np.divide(overlap, union, out=np.zeros_like(overlap), where=union > 0)


class ReferenceLocator:
    """Locates the section group that best matches a selected position."""

    def __init__(self, converter: ViewportConverter):
        """Initialize locator.

        Args:
            converter: Converter from normalized to pixel coordinates.
        """
        self._converter = converter

    def locate(
        self,
        groups: Sequence[SectionGroup],
        page_number: int,
        target: NormalizedPosition,
        viewport: PageViewport,
    ) -> Optional[SectionGroup]:
        """Find the group with maximal overlap with the target.

        Args:
            groups: Candidate groups (groups of other pages are ignored).
            page_number: Page of the selection.
            target: Selected position.
            viewport: Viewport of the selection page.

        Returns:
            Best matching group, or None if nothing overlaps.
        """
        target_rect = self._converter.to_pixels(target.bounding_rect, viewport)
        page_groups = [g for g in groups if g.page_number == page_number]

        overlaps = iou_against(target_rect, [g.bounds for g in page_groups])
        if overlaps.size == 0 or overlaps.max() <= 0:
            logger.warning(
                f"No section group overlaps the selection on page {page_number} "
                f"({len(page_groups)} groups)"
            )
            return None

        best = int(np.argmax(overlaps))
        logger.debug(
            f"Reference group '{page_groups[best].text[:50]}' "
            f"overlap={float(overlaps[best]):.3f}"
        )
        return page_groups[best]
