import pytest

from section_finder.core.models.fragment import SectionGroup
from section_finder.core.models.geometry import (
    NormalizedPosition,
    NormalizedRect,
    PageViewport,
    Rect,
    iou,
)
from section_finder.core.services.locator import ReferenceLocator, iou_against
from section_finder.infrastructure.viewport import ScaledViewportConverter

VIEWPORT = PageViewport(600, 800)


def _group(fragment, text, left, top, page=1):
    return SectionGroup.from_fragments([fragment(text, left, top, page=page)])


@pytest.fixture
def locator():
    return ReferenceLocator(ScaledViewportConverter())


def test_iou_against_matches_scalar_iou():
    target = Rect(0, 0, 2, 2)
    candidates = [Rect(0, 0, 2, 2), Rect(1, 1, 2, 2), Rect(5, 5, 1, 1), Rect(0, 0, 0, 0)]

    overlaps = iou_against(target, candidates)

    assert list(overlaps) == pytest.approx([iou(target, c) for c in candidates])


def test_iou_against_nothing_is_empty():
    assert iou_against(Rect(0, 0, 1, 1), []).size == 0


def test_locates_group_under_selection(locator, fragment, position):
    heading = _group(fragment, "Heading", 50, 100)
    body = _group(fragment, "Body", 50, 300)

    found = locator.locate([heading, body], 1, position(50, 300, 250, 314, 1), VIEWPORT)

    assert found is body


def test_picks_maximal_overlap(locator, fragment, position):
    heading = _group(fragment, "Heading", 50, 100)
    nearby = _group(fragment, "Nearby", 50, 120)

    found = locator.locate([heading, nearby], 1, position(50, 118, 250, 132, 1), VIEWPORT)

    assert found is nearby


def test_ignores_groups_on_other_pages(locator, fragment, position):
    other_page = _group(fragment, "Heading", 50, 100, page=2)

    assert locator.locate([other_page], 1, position(50, 100, 250, 114, 1), VIEWPORT) is None


def test_returns_none_without_overlap(locator, fragment, position):
    heading = _group(fragment, "Heading", 50, 100)

    assert locator.locate([heading], 1, position(400, 600, 450, 620, 1), VIEWPORT) is None


def test_converts_selection_to_page_viewport(locator, fragment):
    heading = _group(fragment, "Heading", 100, 200)
    # captured at half the zoom of the current viewport
    selection = NormalizedPosition(
        bounding_rect=NormalizedRect(50, 100, 150, 107, 300, 400, 1),
        page_number=1,
    )

    assert locator.locate([heading], 1, selection, VIEWPORT) is heading
