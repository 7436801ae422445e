import pytest

from section_finder.core.models.result import TextMatch
from section_finder.core.strategies.ngram import (
    deduplicate_matches,
    find_similar_text,
    jaccard_similarity,
    tokenize_into_ngrams,
    window_sizes,
)

PHRASE = "alpha beta gamma delta epsilon"
FILLER = " ".join(f"w{i}" for i in range(20))


def test_tokenize_builds_bigrams_and_trigrams():
    tokens = tokenize_into_ngrams("The  quick\nbrown fox")

    assert tokens == [
        "the quick",
        "quick brown",
        "brown fox",
        "the quick brown",
        "quick brown fox",
    ]


def test_tokenize_short_text_has_no_ngrams():
    assert tokenize_into_ngrams("word") == []
    assert tokenize_into_ngrams("   ") == []


def test_jaccard_similarity():
    assert jaccard_similarity(["a", "b"], ["b", "c"]) == pytest.approx(1 / 3)
    assert jaccard_similarity([], []) == 0.0


def test_window_sizes_allow_twenty_percent_variance():
    assert list(window_sizes(4)) == [3, 4, 5]
    assert list(window_sizes(5)) == [4, 5, 6]
    assert list(window_sizes(1)) == [1, 2]


def test_exact_phrase_is_found_once():
    corpus = "hello world the quick brown fox jumps over the lazy dog"

    matches = find_similar_text("the quick brown fox", corpus, threshold=0.8)

    assert len(matches) == 1
    assert matches[0].score == pytest.approx(1.0)
    assert matches[0].text == "the quick brown fox"
    assert matches[0].end_word_index - matches[0].start_word_index == 4
    assert matches[0].start_word_index == 2


def test_short_search_text_is_rejected():
    assert find_similar_text("brown fox", "the quick brown fox") == []


def test_distant_repeats_are_both_reported():
    corpus = f"{PHRASE} {FILLER} {PHRASE}"

    matches = find_similar_text(PHRASE, corpus, threshold=0.8)

    assert [m.start_word_index for m in matches] == [0, 25]


def test_adjacent_repeats_collapse_to_one():
    matches = find_similar_text(PHRASE, f"{PHRASE} {PHRASE}", threshold=0.8)

    assert len(matches) == 1


def test_deduplicate_keeps_highest_score_per_cluster():
    matches = [
        TextMatch("a", 0.85, 0, 5),
        TextMatch("b", 0.95, 3, 8),
        TextMatch("c", 0.90, 40, 45),
    ]

    kept = deduplicate_matches(matches)

    assert [m.text for m in kept] == ["b", "c"]


def test_threshold_filters_partial_windows():
    corpus = "alpha beta gamma delta omega"

    assert find_similar_text(PHRASE, corpus, threshold=0.8) == []
    assert find_similar_text(PHRASE, corpus, threshold=0.3)
