"""Page fragment source implementations."""
from .pymupdf_source import PyMuPDFDocument
from .pypdf_source import PypdfDocument

__all__ = ["PyMuPDFDocument", "PypdfDocument"]
