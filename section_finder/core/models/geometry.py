"""Geometry domain models."""
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in a page's pixel space."""
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    @classmethod
    def from_edges(cls, left: float, top: float, right: float, bottom: float) -> "Rect":
        return cls(left=left, top=top, width=right - left, height=bottom - top)

    @classmethod
    def union(cls, rects: Iterable["Rect"]) -> "Rect":
        """Minimal rectangle covering all rects (zero rect when empty)."""
        rects = list(rects)
        if not rects:
            return cls(0.0, 0.0, 0.0, 0.0)

        return cls.from_edges(
            min(r.left for r in rects),
            min(r.top for r in rects),
            max(r.right for r in rects),
            max(r.bottom for r in rects),
        )

    def overlap_area(self, other: "Rect") -> float:
        overlap_x = max(0.0, min(self.right, other.right) - max(self.left, other.left))
        overlap_y = max(0.0, min(self.bottom, other.bottom) - max(self.top, other.top))
        return overlap_x * overlap_y


def iou(first: Rect, second: Rect) -> float:
    """Intersection-over-Union of two rectangles, 0 when the union is empty."""
    overlap = first.overlap_area(second)
    union_area = first.area + second.area - overlap
    return overlap / union_area if union_area > 0 else 0.0


@dataclass(frozen=True)
class PageViewport:
    """Page dimensions at the current render scale."""
    width: float
    height: float


@dataclass(frozen=True)
class NormalizedRect:
    """Rectangle relative to the dimensions it was captured against.

    ``width``/``height`` are the reference page dimensions, so a pixel
    coordinate on any viewport is ``viewport_dim * value / reference_dim``.
    """
    x1: float
    y1: float
    x2: float
    y2: float
    width: float
    height: float
    page_number: int | None = None

    @property
    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class NormalizedPosition:
    """Resolution-independent position of a selection or result."""
    bounding_rect: NormalizedRect
    page_number: int
    rects: tuple[NormalizedRect, ...] = ()

    @property
    def is_valid(self) -> bool:
        return self.page_number >= 1 and self.bounding_rect.is_valid
