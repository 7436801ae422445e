import pytest

from section_finder.core.models.fragment import TextFragment, TextItem
from section_finder.core.models.geometry import (
    NormalizedPosition,
    NormalizedRect,
    PageViewport,
    Rect,
)

PAGE_WIDTH = 600.0
PAGE_HEIGHT = 800.0


def make_fragment(
    text,
    left,
    top,
    width=200.0,
    height=14.0,
    page=1,
    font="Times New Roman",
    size=14.0,
    bold=False,
):
    return TextFragment(
        text=text,
        bounds=Rect(left, top, width, height),
        page_number=page,
        font_family=font,
        font_size=size,
        font_weight="bold" if bold else "normal",
        is_bold=bold,
    )


def make_position(left, top, right, bottom, page):
    return NormalizedPosition(
        bounding_rect=NormalizedRect(
            x1=left,
            y1=top,
            x2=right,
            y2=bottom,
            width=PAGE_WIDTH,
            height=PAGE_HEIGHT,
            page_number=page,
        ),
        page_number=page,
    )


class FakeDocument:
    """In-memory document serving fragments and text items per page."""

    def __init__(self, pages, total_pages, failing=(), missing_viewports=()):
        self.pages = pages
        self._total_pages = total_pages
        self.failing = set(failing)
        self.missing_viewports = set(missing_viewports)
        self.requested = []

    @property
    def total_pages(self):
        return self._total_pages

    def viewport_for(self, page_number):
        if page_number in self.missing_viewports:
            return None
        return PageViewport(PAGE_WIDTH, PAGE_HEIGHT)

    def get_fragments(self, page_number):
        self.requested.append(page_number)
        if page_number in self.failing:
            raise RuntimeError(f"cannot read page {page_number}")
        return list(self.pages.get(page_number, []))

    def get_text_items(self, page_number):
        self.requested.append(page_number)
        if page_number in self.failing:
            raise RuntimeError(f"cannot read page {page_number}")
        return [
            TextItem(text=f.text, bounds=f.bounds, page_number=f.page_number)
            for f in self.pages.get(page_number, [])
        ]


@pytest.fixture
def fragment():
    return make_fragment


@pytest.fixture
def position():
    return make_position


@pytest.fixture
def fake_document():
    return FakeDocument
