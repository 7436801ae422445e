"""Grouping service - clusters page fragments into section groups."""

import logging
from functools import cmp_to_key
from typing import Iterable, Sequence

from ..models.fragment import SectionGroup, Signature, TextFragment
from ..models.geometry import Rect

logger = logging.getLogger(__name__)

DEFAULT_MAX_LINE_GAP = 30.0
DEFAULT_MAX_COLUMN_GAP = 150.0
DEFAULT_ROW_TOLERANCE = 5.0


def build_signature(fragments: Sequence[TextFragment]) -> Signature:
    """Compute the structural signature of a fragment set.

    The font family is the first one observed; groups are assumed to be
    predominantly single-family.
    """
    if not fragments:
        return Signature.empty()

    bounds = Rect.union(f.bounds for f in fragments)

    return Signature(
        element_count=len(fragments),
        font_family=fragments[0].font_family,
        avg_font_size=sum(f.font_size for f in fragments) / len(fragments),
        is_bold=any(f.is_bold for f in fragments),
        text_length=sum(len(f.text) for f in fragments),
        line_height=bounds.height,
        left=bounds.left,
    )


def _reading_order(row_tolerance: float):
    def compare(a: TextFragment, b: TextFragment) -> int:
        y_diff = a.bounds.top - b.bounds.top
        if abs(y_diff) < row_tolerance:
            x_diff = a.bounds.left - b.bounds.left
            return (x_diff > 0) - (x_diff < 0)
        return (y_diff > 0) - (y_diff < 0)

    return cmp_to_key(compare)


def _belongs_to_group(
    fragment: TextFragment,
    group_bounds: Rect,
    max_line_gap: float,
    max_column_gap: float,
) -> bool:
    bounds = fragment.bounds

    on_same_line = bounds.top <= group_bounds.bottom and bounds.bottom >= group_bounds.top
    if on_same_line:
        return True

    vertical_gap = bounds.top - group_bounds.bottom
    horizontal_overlap = (
        bounds.right >= group_bounds.left - max_column_gap
        and bounds.left <= group_bounds.right + max_column_gap
    )
    return 0 <= vertical_gap <= max_line_gap and horizontal_overlap


def group_fragments(
    fragments: Iterable[TextFragment],
    max_line_gap: float = DEFAULT_MAX_LINE_GAP,
    max_column_gap: float = DEFAULT_MAX_COLUMN_GAP,
    row_tolerance: float = DEFAULT_ROW_TOLERANCE,
) -> list[SectionGroup]:
    """Group fragments into lines/paragraphs.

    Args:
        fragments: Fragments of a single page.
        max_line_gap: Max vertical gap to the next line of the same group.
        max_column_gap: Max horizontal distance to stay in the same column.
        row_tolerance: Tops closer than this are treated as one visual row.

    Returns:
        Groups in top-to-bottom scan order.
    """
    candidates = [f for f in fragments if f.text and f.text.strip()]
    if not candidates:
        return []

    ordered = sorted(candidates, key=_reading_order(row_tolerance))

    groups: list[SectionGroup] = []
    current: list[TextFragment] = [ordered[0]]
    current_bounds = ordered[0].bounds

    for fragment in ordered[1:]:
        if _belongs_to_group(fragment, current_bounds, max_line_gap, max_column_gap):
            current.append(fragment)
            current_bounds = Rect.union((current_bounds, fragment.bounds))
        else:
            groups.append(SectionGroup.from_fragments(current))
            current = [fragment]
            current_bounds = fragment.bounds

    groups.append(SectionGroup.from_fragments(current))
    return groups


class SectionGrouper:
    """Configured fragment grouper."""

    def __init__(
        self,
        max_line_gap: float = DEFAULT_MAX_LINE_GAP,
        max_column_gap: float = DEFAULT_MAX_COLUMN_GAP,
        row_tolerance: float = DEFAULT_ROW_TOLERANCE,
    ):
        """Initialize grouper.

        Args:
            max_line_gap: Max vertical gap between lines of one group.
            max_column_gap: Horizontal tolerance for column continuity.
            row_tolerance: Vertical tolerance for one visual row.
        """
        self._max_line_gap = max_line_gap
        self._max_column_gap = max_column_gap
        self._row_tolerance = row_tolerance

    def group(self, fragments: Iterable[TextFragment]) -> list[SectionGroup]:
        groups = group_fragments(
            fragments,
            max_line_gap=self._max_line_gap,
            max_column_gap=self._max_column_gap,
            row_tolerance=self._row_tolerance,
        )
        logger.debug(f"Grouped fragments into {len(groups)} sections")
        return groups
