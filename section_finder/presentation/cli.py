import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict

from section_finder.config.settings import settings
from section_finder.container import configure_container, container, open_document
from section_finder.core.models.geometry import NormalizedPosition, NormalizedRect
from section_finder.core.models.result import SearchOptions
from section_finder.core.services.search_service import SectionSearchService
from section_finder.core.services.text_search_service import TextSearchService
from section_finder.core.strategies.ngram import find_similar_text

logger = logging.getLogger(__name__)


def _progress(current: int, total: int, found: int) -> None:
    logger.debug(f"Progress: {current}/{total} pages, {found} found")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="section-finder",
        description="Find sections of a PDF similar to a selected passage.",
    )
    parser.add_argument("--reader", choices=["pymupdf", "pypdf"], default=None)
    parser.add_argument("--verbose", "-v", action="store_true")
    commands = parser.add_subparsers(dest="command", required=True)

    similar = commands.add_parser("similar", help="find sections similar to a selection")
    similar.add_argument("pdf")
    similar.add_argument("--page", type=int, required=True, help="1-based page of the selection")
    similar.add_argument(
        "--rect",
        type=float,
        nargs=4,
        metavar=("X1", "Y1", "X2", "Y2"),
        required=True,
        help="selection rectangle in PDF points, top-left origin",
    )
    similar.add_argument("--text", required=True, help="selected text")
    similar.add_argument("--threshold", type=float, default=None)
    similar.add_argument("--max-results", type=int, default=settings.search_max_results)
    similar.add_argument("--max-pages", type=int, default=settings.search_max_pages)
    similar.add_argument("--backend", choices=["structural", "text"], default="structural")

    text = commands.add_parser("text", help="n-gram search over each page's plain text")
    text.add_argument("pdf")
    text.add_argument("--query", required=True)
    text.add_argument("--threshold", type=float, default=settings.ngram_threshold)

    return parser


def cmd_similar(args: argparse.Namespace) -> int:
    """Similar command - run a similar-section search and print JSON."""
    document = open_document(args.pdf, settings)
    configure_container(settings, document)

    viewport = document.viewport_for(args.page)
    x1, y1, x2, y2 = args.rect
    position = NormalizedPosition(
        bounding_rect=NormalizedRect(
            x1=x1,
            y1=y1,
            x2=x2,
            y2=y2,
            width=viewport.width / settings.render_scale,
            height=viewport.height / settings.render_scale,
            page_number=args.page,
        ),
        page_number=args.page,
    )

    if args.backend == "text":
        service = container.resolve(TextSearchService)
        threshold = args.threshold if args.threshold is not None else settings.ngram_threshold
    else:
        service = container.resolve(SectionSearchService)
        threshold = args.threshold if args.threshold is not None else settings.search_threshold

    options = SearchOptions(
        selected_text=args.text,
        selected_position=position,
        threshold=threshold,
        max_results=args.max_results,
        max_pages=args.max_pages,
        on_progress=_progress,
    )
    results = asyncio.run(service.find_similar_sections(options))

    print(json.dumps([asdict(r) for r in results], indent=2, ensure_ascii=False))
    logger.info(f"Found {len(results)} similar sections")
    return 0


def cmd_text(args: argparse.Namespace) -> int:
    """Text command - n-gram matches per page."""
    document = open_document(args.pdf, settings)

    matches = []
    for page_number in range(1, document.total_pages + 1):
        items = document.get_text_items(page_number)
        corpus = " ".join(item.text for item in items)
        for match in find_similar_text(
            args.query,
            corpus,
            threshold=args.threshold,
            min_gram=settings.ngram_min_gram,
            max_gram=settings.ngram_max_gram,
            min_text_length=settings.ngram_min_text_length,
        ):
            matches.append({"page_number": page_number, **asdict(match)})

    matches.sort(key=lambda m: m["score"], reverse=True)
    print(json.dumps(matches, indent=2, ensure_ascii=False))
    logger.info(f"Found {len(matches)} matches")
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)

    if args.reader:
        settings.pdf_reader = args.reader

    if args.command == "similar":
        return cmd_similar(args)
    return cmd_text(args)


if __name__ == "__main__":
    sys.exit(main())
