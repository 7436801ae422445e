"""Search service - structural similar-section search."""

import asyncio
import inspect
import logging
from typing import Any, Optional, Sequence

from ..models.fragment import SectionGroup, TextFragment
from ..models.geometry import NormalizedPosition, PageViewport, iou
from ..models.result import SearchOptions, SimilarityResult
from ..protocols.cache import GroupCache
from ..protocols.document import DocumentInfo
from ..protocols.fragment_source import PageFragmentSource
from ..protocols.viewport import ViewportConverter
from ..strategies.scoring import StructuralScorer
from .grouping import SectionGrouper
from .locator import ReferenceLocator

logger = logging.getLogger(__name__)


def page_window(current_page: int, total_pages: int, max_pages: int) -> list[int]:
    """Pages to search, centered on the current page and clamped to the document.

    Args:
        current_page: Page of the selection.
        total_pages: Number of pages in the document.
        max_pages: Window width.

    Returns:
        Ascending 1-based page numbers.
    """
    if total_pages <= 0:
        return []

    start = max(1, current_page - max_pages // 2)
    end = min(total_pages, start + max_pages - 1)

    if end - start + 1 < max_pages:
        if start == 1:
            end = min(total_pages, max_pages)
        elif end == total_pages:
            start = max(1, total_pages - max_pages + 1)

    return list(range(start, end + 1))


def is_rejected(options: SearchOptions, min_selection_length: int) -> bool:
    """Check whether a selection is too short or malformed to search for."""
    text_length = len(options.selected_text.strip()) if options.selected_text else 0
    if text_length < min_selection_length:
        logger.info(f"Selection too short for similarity search: {text_length} chars")
        return True

    if not options.selected_position.is_valid:
        logger.info("Selection position is missing page dimensions")
        return True

    return False


async def resolve(value: Any) -> Any:
    """Await ``value`` if a collaborator returned an awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value


def batched(pages: list[int], size: int) -> list[list[int]]:
    size = max(1, size)
    return [pages[i : i + size] for i in range(0, len(pages), size)]


class SectionSearchService:
    """Finds sections structurally similar to a selected passage."""

    def __init__(
        self,
        document: DocumentInfo,
        fragment_source: PageFragmentSource,
        converter: ViewportConverter,
        grouper: SectionGrouper | None = None,
        scorer: StructuralScorer | None = None,
        locator: ReferenceLocator | None = None,
        cache: GroupCache | None = None,
        min_selection_length: int = 10,
        same_section_iou: float = 0.3,
        batch_size: int = 5,
    ):
        """Initialize search service.

        Args:
            document: Page count and viewports.
            fragment_source: Per-page fragment extraction.
            converter: Pixel/normalized coordinate conversion.
            grouper: Fragment grouper.
            scorer: Structural scorer.
            locator: Reference locator.
            cache: Optional grouped-page cache owned by the caller.
            min_selection_length: Minimum stripped selection length.
            same_section_iou: Overlap above which a same-page group is the selection itself.
            batch_size: Pages extracted together before yielding.
        """
        self._document = document
        self._source = fragment_source
        self._converter = converter
        self._grouper = grouper or SectionGrouper()
        self._scorer = scorer or StructuralScorer()
        self._locator = locator or ReferenceLocator(converter)
        self._cache = cache
        self._min_selection_length = min_selection_length
        self._same_section_iou = same_section_iou
        self._batch_size = batch_size

    async def find_similar_sections(self, options: SearchOptions) -> list[SimilarityResult]:
        """Find sections similar to the selection.

        Args:
            options: Search options.

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
            logger.warning("Document has no pages to search")
            return []

        logger.info(
            f"Similarity search on pages {pages[0]}-{pages[-1]} "
            f"for '{options.selected_text[:50]}' (threshold={options.threshold})"
        )

        groups = await self._collect_groups(pages, options)
        logger.info(f"Created {len(groups)} section groups")

        viewport = self._viewport(current_page)
        if viewport is None:
            logger.warning(f"Could not get viewport for page {current_page}")
            return []

        reference = self._locator.locate(
            groups, current_page, options.selected_position, viewport
        )
        if reference is None:
            logger.warning("Could not find reference group at selected position")
            return []

        total = len(pages)
        options.report(total, total, 0)

        ranked = self.rank_candidates(
            reference, groups, options.threshold, options.max_results
        )

        results: list[SimilarityResult] = []
        for group, score in ranked:
            position = self._to_position(group)
            if position is None:
                continue

            results.append(SimilarityResult(text=group.text, score=score, position=position))
            options.report(total, total, len(results))

        options.report(total, total, len(results))
        logger.info(f"Similarity search found {len(results)} sections")
        return results

    def rank_candidates(
        self,
        reference: SectionGroup,
        groups: Sequence[SectionGroup],
        threshold: float,
        max_results: int,
    ) -> list[tuple[SectionGroup, float]]:
        """Score candidates against the reference and keep the best.

        Args:
            reference: Reference group.
            groups: All groups of the page window.
            threshold: Minimum score.
            max_results: Maximum number of candidates kept.

        Returns:
            (group, score) pairs sorted by score descending.
        """
        kept: list[tuple[SectionGroup, float]] = []

        for group in groups:
            if (
                group.page_number == reference.page_number
                and iou(reference.bounds, group.bounds) > self._same_section_iou
            ):
                continue

            score = self._scorer.score(
                reference.signature, group.signature, reference.text, group.text
            )
            if score >= threshold:
                kept.append((group, score))

        kept.sort(key=lambda pair: pair[1], reverse=True)
        return kept[:max_results]

    async def _collect_groups(
        self, pages: list[int], options: SearchOptions
    ) -> list[SectionGroup]:
        groups: list[SectionGroup] = []
        done = 0

        for batch in batched(pages, self._batch_size):
            extracted = await asyncio.gather(*(self._extract_page(p) for p in batch))

            for page_number, fragments in zip(batch, extracted):
                done += 1
                options.report(done, len(pages), 0)
                groups.extend(self._group_page(page_number, fragments))

            await asyncio.sleep(0)

        return groups

    async def _extract_page(self, page_number: int) -> list[TextFragment]:
        try:
            fragments = await resolve(self._source.get_fragments(page_number))
        except Exception as e:
            logger.warning(f"Skipping page {page_number}: extraction failed: {e}")
            return []

        return [f for f in fragments or [] if f.page_number == page_number]

    def _group_page(self, page_number: int, fragments: list[TextFragment]) -> list[SectionGroup]:
        if not fragments:
            return []

        if self._cache is None:
            return self._grouper.group(fragments)

        key = self._cache.fingerprint(page_number, fragments)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug(f"Group cache hit for page {page_number}")
            return cached

        groups = self._grouper.group(fragments)
        self._cache.put(key, groups)
        return groups

    def _viewport(self, page_number: int) -> Optional[PageViewport]:
        try:
            return self._document.viewport_for(page_number)
        except Exception as e:
            logger.warning(f"No viewport for page {page_number}: {e}")
            return None

    def _to_position(self, group: SectionGroup) -> Optional[NormalizedPosition]:
        viewport = self._viewport(group.page_number)
        if viewport is None:
            return None

        page = group.page_number
        return NormalizedPosition(
            bounding_rect=self._converter.to_normalized(group.bounds, viewport, page),
            page_number=page,
            rects=tuple(
                self._converter.to_normalized(f.bounds, viewport, page)
                for f in group.fragments
            ),
        )
