import logging
from dataclasses import dataclass

from ..models.fragment import Signature

logger = logging.getLogger(__name__)

_FONT_CLASSES = ("serif", "sans", "times", "arial")


@dataclass(frozen=True)
class ScoreWeights:
    """Weights of the structural sub-scores.

    The defaults total 1.10; the final score is divided by the sum of the
    weights actually applied.
    """
    horizontal: float = 0.25
    element_count: float = 0.10
    font_size: float = 0.15
    text: float = 0.15
    line_height: float = 0.10
    font_family: float = 0.20
    bold: float = 0.15

    @property
    def total(self) -> float:
        return (
            self.horizontal
            + self.element_count
            + self.font_size
            + self.text
            + self.line_height
            + self.font_family
            + self.bold
        )


def word_set(text: str, min_length: int) -> set[str]:
    """Lowercase whitespace-separated words longer than ``min_length``."""
    return {w for w in text.lower().split() if len(w) > min_length}


def jaccard(first: set[str], second: set[str]) -> float:
    union = first | second
    if not union:
        return 0.0
    return len(first & second) / len(union)


def relative_difference(a: float, b: float) -> float:
    """``|a - b| / max(a, b)``; 0 when both are 0, 1 when undefined otherwise."""
    denominator = max(a, b)
    if denominator <= 0:
        return 0.0 if a == 0 and b == 0 else 1.0
    return abs(a - b) / denominator


def length_ratio(a: float, b: float) -> float:
    """``min / max`` of two lengths; 1 when both are 0."""
    larger = max(a, b)
    if larger <= 0:
        return 1.0 if a == 0 and b == 0 else 0.0
    return min(a, b) / larger


def font_family_similarity(first: str, second: str) -> float:
    if first == second:
        return 1.0

    first_lower = first.lower()
    second_lower = second.lower()
    for family_class in _FONT_CLASSES:
        if family_class in first_lower and family_class in second_lower:
            return 0.7
    return 0.0


class StructuralScorer:
    """Weighted structural similarity between two section signatures."""

    def __init__(
        self,
        weights: ScoreWeights | None = None,
        column_tolerance: float = 20.0,
        column_falloff: float = 200.0,
        same_column_min: float = 0.8,
        column_gate_min_overlap: float = 0.15,
    ):
        """Initialize scorer.

        Args:
            weights: Sub-score weights.
            column_tolerance: Left-edge distance still treated as the same column.
            column_falloff: Left-edge distance at which horizontal similarity is 0.
            same_column_min: Horizontal similarity below which the column gate applies.
            column_gate_min_overlap: Min word overlap for a cross-column match.
        """
        self._weights = weights or ScoreWeights()
        self._column_tolerance = column_tolerance
        self._column_falloff = column_falloff
        self._same_column_min = same_column_min
        self._column_gate_min_overlap = column_gate_min_overlap

    @property
    def weights(self) -> ScoreWeights:
        return self._weights

    def horizontal_similarity(self, reference: Signature, candidate: Signature) -> float:
        diff = abs(reference.left - candidate.left)
        if diff < self._column_tolerance:
            return 1.0
        return max(0.0, 1.0 - diff / self._column_falloff)

    def _text_similarity(
        self,
        reference: Signature,
        candidate: Signature,
        reference_text: str,
        candidate_text: str,
    ) -> float:
        reference_words = word_set(reference_text, 2)
        candidate_words = word_set(candidate_text, 2)
        if reference_words and candidate_words:
            return jaccard(reference_words, candidate_words)
        return length_ratio(reference.text_length, candidate.text_length)

    def passes_column_gate(self, reference_text: str, candidate_text: str) -> bool:
        overlap = jaccard(word_set(reference_text, 3), word_set(candidate_text, 3))
        return overlap >= self._column_gate_min_overlap

    def score(
        self,
        reference: Signature,
        candidate: Signature,
        reference_text: str,
        candidate_text: str,
    ) -> float:
        """Score a candidate against the reference.

        Args:
            reference: Reference signature.
            candidate: Candidate signature.
            reference_text: Reference group text.
            candidate_text: Candidate group text.

        Returns:
            Similarity in [0, 1]; 0 for degenerate signatures or a
            cross-column candidate without enough shared words.
        """
        if reference.is_degenerate or candidate.is_degenerate:
            return 0.0

        w = self._weights
        horizontal = self.horizontal_similarity(reference, candidate)

        sub_scores = (
            (horizontal, w.horizontal),
            (
                1.0 - min(2 * relative_difference(reference.element_count, candidate.element_count), 1.0),
                w.element_count,
            ),
            (
                1.0 - min(3 * relative_difference(reference.avg_font_size, candidate.avg_font_size), 1.0),
                w.font_size,
            ),
            (
                self._text_similarity(reference, candidate, reference_text, candidate_text),
                w.text,
            ),
            (
                1.0 - min(2 * relative_difference(reference.line_height, candidate.line_height), 1.0),
                w.line_height,
            ),
            (font_family_similarity(reference.font_family, candidate.font_family), w.font_family),
            (1.0 if reference.is_bold == candidate.is_bold else 0.0, w.bold),
        )

        score = 0.0
        weight = 0.0
        for value, value_weight in sub_scores:
            score += value * value_weight
            weight += value_weight

        final_score = score / weight if weight > 0 else 0.0

        if horizontal < self._same_column_min and not self.passes_column_gate(
            reference_text, candidate_text
        ):
            logger.debug(
                f"Column gate rejected '{candidate_text[:30]}' "
                f"(left {candidate.left:.1f} vs {reference.left:.1f})"
            )
            return 0.0

        return final_score
