import logging
import math
import re
from functools import cached_property
from pathlib import Path

from pypdf import PageObject, PdfReader

from section_finder.core.models.fragment import TextFragment, TextItem, is_bold_weight
from section_finder.core.models.geometry import PageViewport, Rect

logger = logging.getLogger(__name__)

_SUBSET_PREFIX = re.compile(r"^[A-Z]{6}\+")

# Content streams carry no glyph widths here; runs are sized from an average advance.
AVERAGE_GLYPH_WIDTH = 0.5


def multiply(m: list[float], n: list[float]) -> list[float]:
    """Product of two PDF matrices in [a, b, c, d, e, f] form."""
    return [
        m[0] * n[0] + m[1] * n[2],
        m[0] * n[1] + m[1] * n[3],
        m[2] * n[0] + m[3] * n[2],
        m[2] * n[1] + m[3] * n[3],
        m[4] * n[0] + m[5] * n[2] + n[4],
        m[4] * n[1] + m[5] * n[3] + n[5],
    ]


def base_font_name(font_dict) -> str:
    if not font_dict:
        return ""
    name = str(font_dict.get("/BaseFont", "")).lstrip("/")
    return _SUBSET_PREFIX.sub("", name)


class PypdfDocument:
    """Content-stream reader: text runs positioned from their text matrices."""

    def __init__(self, file_path: str | Path, scale: float = 1.0):
        """Initialize reader.

        Args:
            file_path: PDF file.
            scale: Pixels per PDF point of the viewport.
        """
        self._file_path = Path(file_path)
        self._scale = scale

    @cached_property
    def reader(self) -> PdfReader:
        logger.info(f"Opening PDF: {self._file_path.name}")
        return PdfReader(self._file_path)

    @property
    def total_pages(self) -> int:
        return len(self.reader.pages)

    def _page(self, page_number: int) -> PageObject:
        if not 1 <= page_number <= self.total_pages:
            raise IndexError(f"Page {page_number} out of range 1-{self.total_pages}")
        return self.reader.pages[page_number - 1]

    def viewport_for(self, page_number: int) -> PageViewport:
        box = self._page(page_number).mediabox
        return PageViewport(
            width=float(box.width) * self._scale,
            height=float(box.height) * self._scale,
        )

    def _runs(self, page_number: int) -> list[TextFragment]:
        page = self._page(page_number)
        box = page.mediabox
        box_left = float(box.left)
        box_top = float(box.top)
        s = self._scale
        runs: list[TextFragment] = []

        def visitor(text, cm, tm, font_dict, font_size):
            text = text.strip()
            if not text:
                return

            matrix = multiply(list(tm), list(cm))
            size = float(font_size or 0.0) * math.hypot(matrix[2], matrix[3])
            x, y = matrix[4], matrix[5]
            width = len(text) * size * AVERAGE_GLYPH_WIDTH

            family = base_font_name(font_dict)
            weight = "bold" if "bold" in family.lower() else "normal"
            runs.append(
                TextFragment(
                    text=text,
                    bounds=Rect(
                        left=(x - box_left) * s,
                        top=(box_top - y - size) * s,
                        width=width * s,
                        height=size * s,
                    ),
                    page_number=page_number,
                    font_family=family,
                    font_size=size * s,
                    font_weight=weight,
                    is_bold=is_bold_weight(weight),
                )
            )

        page.extract_text(visitor_text=visitor)
        logger.debug(f"Page {page_number}: {len(runs)} text runs")
        return runs

    def get_fragments(self, page_number: int) -> list[TextFragment]:
        return self._runs(page_number)

    def get_text_items(self, page_number: int) -> list[TextItem]:
        return [
            TextItem(text=run.text, bounds=run.bounds, page_number=page_number)
            for run in self._runs(page_number)
        ]
