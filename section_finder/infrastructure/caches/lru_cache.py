import hashlib
import logging
from collections import OrderedDict
from typing import Optional, Sequence

from section_finder.core.models.fragment import SectionGroup, TextFragment

logger = logging.getLogger(__name__)


class LRUGroupCache:
    """Bounded LRU cache of grouped page output keyed by content fingerprint."""

    def __init__(self, max_entries: int = 32):
        """Initialize cache.

        Args:
            max_entries: Entries kept before the least recently used is evicted.
        """
        if max_entries <= 0:
            raise ValueError(f"max_entries must be positive, got {max_entries}")

        self._max_entries = max_entries
        self._entries: OrderedDict[str, list[SectionGroup]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def fingerprint(self, page_number: int, fragments: Sequence[TextFragment]) -> str:
        """Compute content hash of a page's fragments."""
        digest = hashlib.md5(str(page_number).encode())
        for f in fragments:
            b = f.bounds
            digest.update(
                (
                    f"\x1f{f.text}\x1e{b.left:.3f},{b.top:.3f},{b.width:.3f},{b.height:.3f}"
                    f"\x1e{f.font_family}\x1e{f.font_size:.3f}\x1e{int(f.is_bold)}"
                ).encode()
            )
        return digest.hexdigest()

    def get(self, key: str) -> Optional[list[SectionGroup]]:
        groups = self._entries.get(key)
        if groups is None:
            return None

        self._entries.move_to_end(key)
        return list(groups)

    def put(self, key: str, groups: list[SectionGroup]) -> None:
        self._entries[key] = list(groups)
        self._entries.move_to_end(key)

        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted grouped page {evicted[:12]}")

    def clear(self) -> None:
        self._entries.clear()
