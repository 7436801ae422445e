"""Text search service - n-gram similar-section search without layout."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from ..models.fragment import TextItem
from ..models.geometry import NormalizedPosition, PageViewport, Rect, iou
from ..models.result import SearchOptions, SimilarityResult, TextMatch
from ..protocols.document import DocumentInfo
from ..protocols.fragment_source import PageTextSource
from ..protocols.viewport import ViewportConverter
from ..strategies.ngram import MIN_TEXT_LENGTH, find_similar_text
from .search_service import batched, is_rejected, page_window, resolve

logger = logging.getLogger(__name__)


@dataclass
class _PageMatch:
    match: TextMatch
    page_number: int
    items: list[TextItem]
    bounds: Rect


def word_owners(items: list[TextItem]) -> list[int]:
    """Index of the owning item for every word of the joined page text."""
    owners = []
    for index, item in enumerate(items):
        owners.extend([index] * len(item.text.split()))
    return owners


def items_in_range(items: list[TextItem], owners: list[int], match: TextMatch) -> list[TextItem]:
    indexes = sorted(set(owners[match.start_word_index : match.end_word_index]))
    return [items[i] for i in indexes]


class TextSearchService:
    """Finds passages similar to the selection using word n-grams only."""

    def __init__(
        self,
        document: DocumentInfo,
        text_source: PageTextSource,
        converter: ViewportConverter,
        min_gram: int = 2,
        max_gram: int = 3,
        min_text_length: int = MIN_TEXT_LENGTH,
        min_selection_length: int = 10,
        same_section_iou: float = 0.3,
        batch_size: int = 5,
    ):
        """Initialize text search service.

        Args:
            document: Page count and viewports.
            text_source: Per-page positioned text.
            converter: Pixel/normalized coordinate conversion.
            min_gram: Smallest n-gram size.
            max_gram: Largest n-gram size.
            min_text_length: Minimum normalized search text length for matching.
            min_selection_length: Minimum stripped selection length.
            same_section_iou: Overlap above which a match is the selection itself.
            batch_size: Pages read together before yielding.
        """
        self._document = document
        self._source = text_source
        self._converter = converter
        self._min_gram = min_gram
        self._max_gram = max_gram
        self._min_text_length = min_text_length
        self._min_selection_length = min_selection_length
        self._same_section_iou = same_section_iou
        self._batch_size = batch_size

    async def find_similar_sections(self, options: SearchOptions) -> list[SimilarityResult]:
        """Find passages similar to the selection.

        Args:
            options: Search options; ``threshold`` applies to n-gram similarity.

        Returns:
            Results ordered by descending score.

        Raises:
            ValueError: If the options are out of range.
        """
        options.validate()
        if is_rejected(options, self._min_selection_length):
            return []

        current_page = options.selected_position.page_number
        pages = page_window(current_page, self._document.total_pages, options.max_pages)
        if not pages:
            return []

        items_by_page = await self._collect_items(pages, options)
        selection = self._selection_rect(options)

        candidates: list[_PageMatch] = []
        for page_number in pages:
            items = items_by_page.get(page_number, [])
            if not items:
                continue

            owners = word_owners(items)
            corpus = " ".join(item.text for item in items)
            for match in find_similar_text(
                options.selected_text,
                corpus,
                threshold=options.threshold,
                min_gram=self._min_gram,
                max_gram=self._max_gram,
                min_text_length=self._min_text_length,
            ):
                matched = items_in_range(items, owners, match)
                if not matched:
                    continue

                bounds = Rect.union(item.bounds for item in matched)
                if (
                    page_number == current_page
                    and selection is not None
                    and iou(selection, bounds) > self._same_section_iou
                ):
                    continue

                candidates.append(_PageMatch(match, page_number, matched, bounds))

        candidates.sort(key=lambda c: c.match.score, reverse=True)

        total = len(pages)
        results: list[SimilarityResult] = []
        for candidate in candidates[: options.max_results]:
            position = self._to_position(candidate)
            if position is None:
                continue

            results.append(
                SimilarityResult(
                    text=candidate.match.text,
                    score=candidate.match.score,
                    position=position,
                )
            )
            options.report(total, total, len(results))

        options.report(total, total, len(results))
        logger.info(f"Text search found {len(results)} passages")
        return results

    async def _collect_items(
        self, pages: list[int], options: SearchOptions
    ) -> dict[int, list[TextItem]]:
        items_by_page: dict[int, list[TextItem]] = {}
        done = 0

        for batch in batched(pages, self._batch_size):
            extracted = await asyncio.gather(*(self._read_page(p) for p in batch))
            for page_number, items in zip(batch, extracted):
                done += 1
                items_by_page[page_number] = items
                options.report(done, len(pages), 0)

            await asyncio.sleep(0)

        return items_by_page

    async def _read_page(self, page_number: int) -> list[TextItem]:
        try:
            items = await resolve(self._source.get_text_items(page_number))
        except Exception as e:
            logger.warning(f"Skipping page {page_number}: text extraction failed: {e}")
            return []

        return [i for i in items or [] if i.text and i.text.strip()]

    def _viewport(self, page_number: int) -> Optional[PageViewport]:
        try:
            return self._document.viewport_for(page_number)
        except Exception as e:
            logger.warning(f"No viewport for page {page_number}: {e}")
            return None

    def _selection_rect(self, options: SearchOptions) -> Optional[Rect]:
        viewport = self._viewport(options.selected_position.page_number)
        if viewport is None:
            return None
        return self._converter.to_pixels(options.selected_position.bounding_rect, viewport)

    def _to_position(self, candidate: _PageMatch) -> Optional[NormalizedPosition]:
        viewport = self._viewport(candidate.page_number)
        if viewport is None:
            return None

        page = candidate.page_number
        return NormalizedPosition(
            bounding_rect=self._converter.to_normalized(candidate.bounds, viewport, page),
            page_number=page,
            rects=tuple(
                self._converter.to_normalized(item.bounds, viewport, page)
                for item in candidate.items
            ),
        )
