"""Domain models."""
from .geometry import NormalizedPosition, NormalizedRect, PageViewport, Rect, iou
from .fragment import SectionGroup, Signature, TextFragment, TextItem, is_bold_weight
from .result import ProgressCallback, SearchOptions, SimilarityResult, TextMatch

__all__ = [
    "Rect",
    "iou",
    "PageViewport",
    "NormalizedRect",
    "NormalizedPosition",
    "TextFragment",
    "TextItem",
    "Signature",
    "SectionGroup",
    "is_bold_weight",
    "SearchOptions",
    "SimilarityResult",
    "TextMatch",
    "ProgressCallback",
]
