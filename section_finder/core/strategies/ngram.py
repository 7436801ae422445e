"""Text-only similarity using Jaccard similarity over word n-grams."""

import logging
import math
from typing import Iterable

from ..models.result import TextMatch

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 15
WINDOW_VARIANCE = 0.2
OVERLAP_TOLERANCE = 5


def normalize_text(text: str) -> str:
    """Lowercase and collapse whitespace."""
    return " ".join(text.lower().split())


def tokenize_into_ngrams(text: str, min_gram: int = 2, max_gram: int = 3) -> list[str]:
    """Tokenize text into contiguous word n-grams of sizes min_gram..max_gram."""
    words = normalize_text(text).split()
    return _ngrams(words, min_gram, max_gram)


def _ngrams(words: list[str], min_gram: int, max_gram: int) -> list[str]:
    tokens = []
    for gram_size in range(min_gram, max_gram + 1):
        for i in range(len(words) - gram_size + 1):
            tokens.append(" ".join(words[i : i + gram_size]))
    return tokens


def jaccard_similarity(first: Iterable[str], second: Iterable[str]) -> float:
    """|intersection| / |union| of two token sets, 0 for an empty union."""
    first_set = set(first)
    second_set = set(second)
    union_size = len(first_set | second_set)
    if union_size == 0:
        return 0.0
    return len(first_set & second_set) / union_size


def ranges_overlap(first: TextMatch, second: TextMatch, tolerance: int = OVERLAP_TOLERANCE) -> bool:
    return not (
        first.end_word_index + tolerance < second.start_word_index
        or first.start_word_index - tolerance > second.end_word_index
    )


def deduplicate_matches(matches: list[TextMatch]) -> list[TextMatch]:
    """Keep the best-scoring match of every overlapping cluster."""
    kept: list[TextMatch] = []
    for match in sorted(matches, key=lambda m: m.score, reverse=True):
        if not any(ranges_overlap(match, existing) for existing in kept):
            kept.append(match)
    return kept


def window_sizes(word_count: int) -> range:
    # round() absorbs float noise such as 5 * 1.2 == 6.000000000000001
    smallest = max(1, math.floor(round(word_count * (1 - WINDOW_VARIANCE), 9)))
    largest = max(smallest, math.ceil(round(word_count * (1 + WINDOW_VARIANCE), 9)))
    return range(smallest, largest + 1)


def find_similar_text(
    search_text: str,
    corpus_text: str,
    threshold: float = 0.8,
    min_gram: int = 2,
    max_gram: int = 3,
    min_text_length: int = MIN_TEXT_LENGTH,
) -> list[TextMatch]:
    """Find corpus windows similar to the search text.

    Args:
        search_text: Text to look for.
        corpus_text: Text to search within.
        threshold: Minimum Jaccard similarity of n-gram sets.
        min_gram: Smallest n-gram size.
        max_gram: Largest n-gram size.
        min_text_length: Shorter (normalized) search texts are rejected.

    Returns:
        Non-overlapping matches sorted by score descending.
    """
    normalized_search = normalize_text(search_text)
    if len(normalized_search) < min_text_length:
        return []

    search_tokens = set(tokenize_into_ngrams(normalized_search, min_gram, max_gram))
    if not search_tokens:
        return []

    corpus_words = normalize_text(corpus_text).split()
    sizes = window_sizes(len(normalized_search.split()))

    matches: list[TextMatch] = []
    for start in range(len(corpus_words) - sizes.start + 1):
        for size in sizes:
            end = start + size
            if end > len(corpus_words):
                break

            window_words = corpus_words[start:end]
            score = jaccard_similarity(
                search_tokens, _ngrams(window_words, min_gram, max_gram)
            )
            if score >= threshold:
                matches.append(
                    TextMatch(
                        text=" ".join(window_words),
                        score=score,
                        start_word_index=start,
                        end_word_index=end,
                    )
                )

    deduplicated = deduplicate_matches(matches)
    if matches:
        logger.debug(f"N-gram matches: {len(matches)} windows -> {len(deduplicated)} kept")
    return deduplicated
