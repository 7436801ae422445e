"""Group cache implementations."""
from .lru_cache import LRUGroupCache

__all__ = ["LRUGroupCache"]
