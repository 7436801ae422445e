"""Core business services."""
from .grouping import SectionGrouper, build_signature, group_fragments
from .locator import ReferenceLocator
from .search_service import SectionSearchService, page_window
from .text_search_service import TextSearchService

__all__ = [
    "SectionGrouper",
    "build_signature",
    "group_fragments",
    "ReferenceLocator",
    "SectionSearchService",
    "TextSearchService",
    "page_window",
]
