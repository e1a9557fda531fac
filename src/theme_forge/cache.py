"""Look-aside caches for the generation engine.

Caches are optional. Every engine function produces the same result with or
without one, so callers attach a cache only to save work. Keys are built
from the full content of the inputs, never from call order.
"""

import logging
import threading
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 1000


class ContentCache:
    """Bounded content-keyed cache with least-hit eviction."""

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE, name: str = "cache"):
        """Initialize the cache.

        Args:
            max_size: Entries kept before the least used one is evicted
            name: Label used in log messages and stats
        """
        self.max_size = max_size
        self.name = name
        # key -> [value, hits]
        self._entries: Dict[Hashable, list] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            entry[1] += 1
            self.hits += 1
            return entry[0]

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_size:
                self._evict_least_used()
            self._entries[key] = [value, 0]

    def get_or_compute(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        """Return the cached value for ``key``, computing and storing it on a miss."""
        value = self.get(key)
        if value is None:
            value = compute()
            self.set(key, value)
        return value

    def _evict_least_used(self) -> None:
        victim = min(self._entries.items(), key=lambda item: item[1][1])[0]
        del self._entries[victim]
        logger.debug(f"{self.name}: evicted {victim!r}")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0
        logger.debug(f"{self.name} cleared")

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def stats(self) -> Dict[str, int]:
        return {"size": len(self._entries), "hits": self.hits, "misses": self.misses}


class ContrastCache(ContentCache):
    """Cache of contrast scores keyed by colors and role flags."""

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE):
        super().__init__(max_size=max_size, name="contrast cache")

    @staticmethod
    def make_key(bg: str, fg: str, is_non_text: bool, is_border: bool,
                 is_weak: bool, is_strong: bool,
                 category: Optional[str]) -> Tuple:
        return (bg.lower(), fg.lower(), is_non_text, is_border, is_weak, is_strong, category or "")


class AnalysisCache:
    """Seed and variant caches used by parameter inference."""

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE):
        self.seeds = ContentCache(max_size=max_size, name="seed cache")
        self.variants = ContentCache(max_size=max_size, name="variant cache")

    def clear(self) -> None:
        self.seeds.clear()
        self.variants.clear()

    def stats(self) -> Dict[str, Dict[str, int]]:
        return {"seeds": self.seeds.stats(), "variants": self.variants.stats()}
