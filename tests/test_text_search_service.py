import asyncio

from section_finder.core.models.fragment import TextItem
from section_finder.core.models.geometry import Rect
from section_finder.core.models.result import SearchOptions, TextMatch
from section_finder.core.services.text_search_service import (
    TextSearchService,
    items_in_range,
    word_owners,
)
from section_finder.infrastructure.viewport import ScaledViewportConverter

PHRASE = "alpha beta gamma delta epsilon"
FILLER = " ".join(f"w{i}" for i in range(20))


def _service(document, **kwargs):
    return TextSearchService(
        document=document,
        text_source=document,
        converter=ScaledViewportConverter(),
        **kwargs,
    )


def _search(service, position, text=PHRASE, **kwargs):
    options = SearchOptions(selected_text=text, selected_position=position, **kwargs)
    return asyncio.run(service.find_similar_sections(options))


def _pages(fragment):
    return {
        3: [fragment(PHRASE, 50, 100, page=3)],
        7: [
            fragment("intro words here", 50, 50, page=7),
            fragment(PHRASE, 50, 100, page=7),
        ],
    }


def test_word_owners_map_words_to_items():
    items = [
        TextItem("one two", Rect(0, 0, 10, 10), 1),
        TextItem("three", Rect(0, 20, 10, 10), 1),
    ]

    owners = word_owners(items)

    assert owners == [0, 0, 1]
    assert items_in_range(items, owners, TextMatch("two three", 1.0, 1, 3)) == items


def test_finds_passage_on_other_page(fragment, fake_document, position):
    document = fake_document(_pages(fragment), total_pages=10)

    results = _search(_service(document), position(50, 100, 250, 114, 3))

    assert len(results) == 1
    assert results[0].text == PHRASE
    assert results[0].score == 1.0
    assert results[0].position.page_number == 7
    assert results[0].position.bounding_rect.y1 == 100
    assert len(results[0].position.rects) == 1


def test_repeat_elsewhere_on_selection_page_is_kept(fragment, fake_document, position):
    pages = {
        3: [
            fragment(PHRASE, 50, 100, page=3),
            fragment(FILLER, 50, 300, page=3),
            fragment(PHRASE, 50, 600, page=3),
        ]
    }

    results = _search(_service(fake_document(pages, total_pages=3)), position(50, 100, 250, 114, 3))

    assert [r.position.bounding_rect.y1 for r in results] == [600]


def test_short_selection_returns_nothing(fragment, fake_document, position):
    document = fake_document(_pages(fragment), total_pages=10)

    assert _search(_service(document), position(50, 100, 250, 114, 3), text="alpha") == []
    assert document.requested == []


def test_failed_page_is_skipped(fragment, fake_document, position):
    pages = _pages(fragment)
    pages[5] = [fragment(PHRASE, 50, 100, page=5)]
    document = fake_document(pages, total_pages=10, failing={5})

    results = _search(_service(document), position(50, 100, 250, 114, 3))

    assert [r.position.page_number for r in results] == [7]


def test_max_results_truncates(fragment, fake_document, position):
    pages = _pages(fragment)
    pages[5] = [fragment(PHRASE, 50, 100, page=5)]
    document = fake_document(pages, total_pages=10)

    results = _search(_service(document), position(50, 100, 250, 114, 3), max_results=1)

    assert len(results) == 1


def test_progress_ends_with_result_count(fragment, fake_document, position):
    calls = []
    document = fake_document(_pages(fragment), total_pages=4)

    results = _search(
        _service(document),
        position(50, 100, 250, 114, 3),
        on_progress=lambda *args: calls.append(args),
    )

    assert calls[:4] == [(1, 4, 0), (2, 4, 0), (3, 4, 0), (4, 4, 0)]
    assert calls[-1] == (4, 4, len(results))
