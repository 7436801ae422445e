"""Scoring and matching strategies."""
from .ngram import find_similar_text, jaccard_similarity, tokenize_into_ngrams
from .scoring import ScoreWeights, StructuralScorer

__all__ = [
    "ScoreWeights",
    "StructuralScorer",
    "find_similar_text",
    "jaccard_similarity",
    "tokenize_into_ngrams",
]
