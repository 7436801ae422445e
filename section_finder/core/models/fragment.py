"""Text fragment and section group models."""
from dataclasses import dataclass

from .geometry import Rect


def is_bold_weight(font_weight: str) -> bool:
    """True for "bold" or a numeric CSS weight of at least 700."""
    weight = (font_weight or "").strip().lower()
    if weight in ("bold", "bolder"):
        return True
    try:
        return int(float(weight)) >= 700
    except ValueError:
        return False


@dataclass(frozen=True)
class TextFragment:
    """Smallest positioned run of text on a page."""
    text: str
    bounds: Rect
    page_number: int
    font_family: str = ""
    font_size: float = 0.0
    font_weight: str = "normal"  # "normal" | "bold" | numeric weight
    is_bold: bool = False


@dataclass(frozen=True)
class TextItem:
    """Positioned run of page text without style, for text-only matching."""
    text: str
    bounds: Rect
    page_number: int


@dataclass(frozen=True)
class Signature:
    """Structural summary of a section group."""
    element_count: int
    font_family: str
    avg_font_size: float
    is_bold: bool
    text_length: int
    line_height: float
    left: float

    @classmethod
    def empty(cls) -> "Signature":
        return cls(
            element_count=0,
            font_family="",
            avg_font_size=0.0,
            is_bold=False,
            text_length=0,
            line_height=0.0,
            left=0.0,
        )

    @property
    def is_degenerate(self) -> bool:
        return self.element_count <= 0


@dataclass(frozen=True)
class SectionGroup:
    """Cluster of fragments forming one logical line or paragraph."""
    fragments: tuple[TextFragment, ...]
    bounds: Rect
    text: str
    page_number: int
    signature: Signature

    @classmethod
    def from_fragments(cls, fragments: list[TextFragment]) -> "SectionGroup":
        """Build a group, deriving bounds, text and signature."""
        if not fragments:
            raise ValueError("Cannot build a section group without fragments")

        from ..services.grouping import build_signature

        page_number = fragments[0].page_number
        if any(f.page_number != page_number for f in fragments):
            raise ValueError("Fragments of one group must share a page")

        return cls(
            fragments=tuple(fragments),
            bounds=Rect.union(f.bounds for f in fragments),
            text=" ".join(f.text for f in fragments),
            page_number=page_number,
            signature=build_signature(fragments),
        )
