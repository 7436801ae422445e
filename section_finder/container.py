import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, TypeVar

from .config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Container:
    _factories: dict[type, Callable[[], Any]] = field(default_factory=dict)
    _singletons: dict[type, Any] = field(default_factory=dict)
    _singleton_flags: set[type] = field(default_factory=set)

    def register(
        self, interface: type[T], factory: Callable[[], T], singleton: bool = False
    ) -> None:
        """Register factory for interface.

        Args:
            interface: Interface type.
            factory: Factory function.
            singleton: Whether to cache instance.
        """
        self._factories[interface] = factory
        self._singletons.pop(interface, None)
        if singleton:
            self._singleton_flags.add(interface)
        else:
            self._singleton_flags.discard(interface)

    def resolve(self, interface: type[T]) -> T:
        if interface in self._singletons:
            return self._singletons[interface]

        if interface not in self._factories:
            raise KeyError(f"No factory registered for {interface}")

        instance = self._factories[interface]()

        if interface in self._singleton_flags:
            self._singletons[interface] = instance

        return instance

    def reset(self) -> None:
        """Reset singletons (for testing)."""
        self._singletons.clear()


container = Container()


def open_document(file_path: str | Path, settings: Settings):
    """Open a PDF with the reader selected in settings.

    Args:
        file_path: PDF file.
        settings: Application settings.

    Returns:
        Document implementing DocumentInfo, PageFragmentSource and PageTextSource.
    """
    from .infrastructure.fragment_sources import PyMuPDFDocument, PypdfDocument

    readers = {"pymupdf": PyMuPDFDocument, "pypdf": PypdfDocument}
    reader = readers.get(settings.pdf_reader.lower())
    if reader is None:
        raise ValueError(
            f"Unknown pdf_reader '{settings.pdf_reader}', expected one of {sorted(readers)}"
        )
    return reader(file_path, scale=settings.render_scale)


def configure_container(settings: Settings, document: Any) -> Container:
    """Configure container with all dependencies.

    Args:
        settings: Application settings.
        document: Opened document acting as DocumentInfo, PageFragmentSource
            and PageTextSource.

    Returns:
        Configured container.
    """
    from .core.protocols.cache import GroupCache
    from .core.protocols.document import DocumentInfo
    from .core.protocols.fragment_source import PageFragmentSource, PageTextSource
    from .core.protocols.viewport import ViewportConverter
    from .core.services.grouping import SectionGrouper
    from .core.services.locator import ReferenceLocator
    from .core.services.search_service import SectionSearchService
    from .core.services.text_search_service import TextSearchService
    from .core.strategies.scoring import StructuralScorer
    from .infrastructure.caches import LRUGroupCache
    from .infrastructure.viewport import ScaledViewportConverter

    container.register(DocumentInfo, lambda: document, singleton=True)
    container.register(PageFragmentSource, lambda: document, singleton=True)
    container.register(PageTextSource, lambda: document, singleton=True)

    container.register(ViewportConverter, ScaledViewportConverter, singleton=True)

    container.register(
        GroupCache,
        lambda: LRUGroupCache(max_entries=settings.group_cache_size),
        singleton=True,
    )

    container.register(
        SectionGrouper,
        lambda: SectionGrouper(
            max_line_gap=settings.group_max_line_gap,
            max_column_gap=settings.group_max_column_gap,
            row_tolerance=settings.group_row_tolerance,
        ),
        singleton=True,
    )

    container.register(
        StructuralScorer,
        lambda: StructuralScorer(
            column_tolerance=settings.column_tolerance,
            column_gate_min_overlap=settings.column_gate_min_overlap,
        ),
        singleton=True,
    )

    container.register(
        ReferenceLocator,
        lambda: ReferenceLocator(container.resolve(ViewportConverter)),
        singleton=True,
    )

    container.register(
        SectionSearchService,
        lambda: SectionSearchService(
            document=container.resolve(DocumentInfo),
            fragment_source=container.resolve(PageFragmentSource),
            converter=container.resolve(ViewportConverter),
            grouper=container.resolve(SectionGrouper),
            scorer=container.resolve(StructuralScorer),
            locator=container.resolve(ReferenceLocator),
            cache=container.resolve(GroupCache),
            min_selection_length=settings.min_selection_length,
            same_section_iou=settings.same_section_iou,
            batch_size=settings.extraction_batch_size,
        ),
        singleton=True,
    )

    container.register(
        TextSearchService,
        lambda: TextSearchService(
            document=container.resolve(DocumentInfo),
            text_source=container.resolve(PageTextSource),
            converter=container.resolve(ViewportConverter),
            min_gram=settings.ngram_min_gram,
            max_gram=settings.ngram_max_gram,
            min_text_length=settings.ngram_min_text_length,
            min_selection_length=settings.min_selection_length,
            same_section_iou=settings.same_section_iou,
            batch_size=settings.extraction_batch_size,
        ),
        singleton=True,
    )

    logger.info("Container configured")
    return container
