"""Search options and result models."""
from dataclasses import dataclass
from typing import Callable, Optional

from .geometry import NormalizedPosition

ProgressCallback = Callable[[int, int, int], None]


@dataclass(frozen=True)
class SimilarityResult:
    """A section similar to the selection."""
    text: str
    score: float
    position: NormalizedPosition


@dataclass(frozen=True)
class TextMatch:
    """Window of corpus words matched by the n-gram matcher."""
    text: str
    score: float
    start_word_index: int
    end_word_index: int  # exclusive


@dataclass(frozen=True)
class SearchOptions:
    """Options for a similar-section search."""
    selected_text: str
    selected_position: NormalizedPosition
    threshold: float = 0.60
    max_results: int = 20
    max_pages: int = 50
    on_progress: Optional[ProgressCallback] = None

    def validate(self) -> None:
        """Raise ValueError for out-of-range configuration."""
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError(f"threshold must be within [0, 1], got {self.threshold}")
        if self.max_results <= 0:
            raise ValueError(f"max_results must be positive, got {self.max_results}")
        if self.max_pages <= 0:
            raise ValueError(f"max_pages must be positive, got {self.max_pages}")

    def report(self, current: int, total: int, found: int) -> None:
        """Invoke the progress callback if one was given."""
        if self.on_progress is not None:
            self.on_progress(current, total, found)
