"""Similar-section search over paginated documents."""
from .core.models import NormalizedPosition, NormalizedRect, SearchOptions, SimilarityResult
from .core.services import SectionSearchService, TextSearchService

__all__ = [
    "NormalizedPosition",
    "NormalizedRect",
    "SearchOptions",
    "SimilarityResult",
    "SectionSearchService",
    "TextSearchService",
]

__version__ = "0.1.0"
