import logging
from functools import cached_property
from pathlib import Path

import fitz  # PyMuPDF

from section_finder.core.models.fragment import TextFragment, TextItem, is_bold_weight
from section_finder.core.models.geometry import PageViewport, Rect

logger = logging.getLogger(__name__)

_BOLD_FLAG = 16


def _is_bold_span(span: dict) -> bool:
    return bool(span.get("flags", 0) & _BOLD_FLAG) or "bold" in span.get("font", "").lower()


class PyMuPDFDocument:
    """Rendered-layout reader: text spans with pixel bounds and style."""

    def __init__(self, file_path: str | Path, scale: float = 1.0):
        """Initialize reader.

        Args:
            file_path: PDF file.
            scale: Pixels per PDF point of the viewport.
        """
        self._file_path = Path(file_path)
        self._scale = scale

    @cached_property
    def document(self) -> fitz.Document:
        logger.info(f"Opening PDF: {self._file_path.name}")
        return fitz.open(str(self._file_path))

    @property
    def total_pages(self) -> int:
        return self.document.page_count

    def close(self) -> None:
        if "document" in self.__dict__:
            self.document.close()
            del self.__dict__["document"]

    def __enter__(self) -> "PyMuPDFDocument":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _page(self, page_number: int) -> fitz.Page:
        if not 1 <= page_number <= self.total_pages:
            raise IndexError(f"Page {page_number} out of range 1-{self.total_pages}")
        return self.document[page_number - 1]

    def viewport_for(self, page_number: int) -> PageViewport:
        rect = self._page(page_number).rect
        return PageViewport(width=rect.width * self._scale, height=rect.height * self._scale)

    def _spans(self, page_number: int):
        page_dict = self._page(page_number).get_text("dict")
        for block in page_dict.get("blocks", []):
            if block.get("type", 0) != 0:
                continue
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    if span.get("text", "").strip():
                        yield span

    def _bounds(self, bbox) -> Rect:
        x0, y0, x1, y1 = bbox
        s = self._scale
        return Rect.from_edges(x0 * s, y0 * s, x1 * s, y1 * s)

    def get_fragments(self, page_number: int) -> list[TextFragment]:
        fragments = []
        for span in self._spans(page_number):
            weight = "bold" if _is_bold_span(span) else "normal"
            fragments.append(
                TextFragment(
                    text=span["text"],
                    bounds=self._bounds(span["bbox"]),
                    page_number=page_number,
                    font_family=span.get("font", ""),
                    font_size=float(span.get("size", 0.0)) * self._scale,
                    font_weight=weight,
                    is_bold=is_bold_weight(weight),
                )
            )

        logger.debug(f"Page {page_number}: {len(fragments)} fragments")
        return fragments

    def get_text_items(self, page_number: int) -> list[TextItem]:
        return [
            TextItem(text=span["text"], bounds=self._bounds(span["bbox"]), page_number=page_number)
            for span in self._spans(page_number)
        ]
