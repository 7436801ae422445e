import pytest

from section_finder.core.services.grouping import group_fragments
from section_finder.infrastructure.caches import LRUGroupCache


def test_fingerprint_is_stable(fragment):
    cache = LRUGroupCache()
    fragments = [fragment("Heading", 50, 100), fragment("Body", 50, 300)]

    assert cache.fingerprint(1, fragments) == cache.fingerprint(1, list(fragments))


def test_fingerprint_changes_with_content_and_page(fragment):
    cache = LRUGroupCache()
    base = cache.fingerprint(1, [fragment("Heading", 50, 100)])

    assert cache.fingerprint(1, [fragment("Heading!", 50, 100)]) != base
    assert cache.fingerprint(1, [fragment("Heading", 51, 100)]) != base
    assert cache.fingerprint(1, [fragment("Heading", 50, 100, bold=True)]) != base
    assert cache.fingerprint(2, [fragment("Heading", 50, 100, page=2)]) != base


def test_get_returns_stored_groups(fragment):
    cache = LRUGroupCache()
    groups = group_fragments([fragment("Heading", 50, 100)])

    cache.put("page-1", groups)

    assert cache.get("page-1") == groups
    assert cache.get("missing") is None


def test_evicts_least_recently_used():
    cache = LRUGroupCache(max_entries=2)
    cache.put("a", [])
    cache.put("b", [])
    cache.get("a")

    cache.put("c", [])

    assert len(cache) == 2
    assert cache.get("b") is None
    assert cache.get("a") == []
    assert cache.get("c") == []


def test_rejects_non_positive_size():
    with pytest.raises(ValueError):
        LRUGroupCache(max_entries=0)
