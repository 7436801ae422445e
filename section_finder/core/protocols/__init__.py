"""Protocol interfaces for dependency injection."""
from .backend import SimilarityBackend
from .cache import GroupCache
from .document import DocumentInfo
from .fragment_source import PageFragmentSource, PageTextSource
from .viewport import ViewportConverter

__all__ = [
    "DocumentInfo",
    "PageFragmentSource",
    "PageTextSource",
    "ViewportConverter",
    "GroupCache",
    "SimilarityBackend",
]
