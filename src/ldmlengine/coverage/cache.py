"""Thread-safe LRU cache for classification results.

A classification session classifies the same paths over and over while
sweeping a dataset. This cache keeps ``(locale, key) -> CoverageLevel``
results for the lifetime of the session.

Architecture:
    - Thread-safe using threading.RLock
    - LRU eviction via OrderedDict when bounded; unbounded when maxsize is None
    - Keys are (canonical locale, Key), both immutable and hashable

Python 3.13+.
"""

from collections import OrderedDict
from threading import RLock

from ldmlengine.enums import CoverageLevel
from ldmlengine.syntax import Key

__all__ = ["ClassificationCache"]

type _CacheKey = tuple[str, Key]


class ClassificationCache:
    """Thread-safe LRU cache of coverage levels.

    Returns None on a miss; callers compute and ``put`` the result.

    Attributes:
        maxsize: Maximum number of cache entries, or None for no bound
        hits: Number of cache hits (for metrics)
        misses: Number of cache misses (for metrics)
    """

    __slots__ = ("_cache", "_hits", "_lock", "_maxsize", "_misses")

    def __init__(self, maxsize: int | None = None) -> None:
        if maxsize is not None and maxsize <= 0:
            msg = "maxsize must be positive"
            raise ValueError(msg)
        self._cache: OrderedDict[_CacheKey, CoverageLevel] = OrderedDict()
        self._maxsize = maxsize
        self._lock = RLock()
        self._hits = 0
        self._misses = 0

    def get(self, locale: str, key: Key) -> CoverageLevel | None:
        """Cached level, or None on a miss."""
        cache_key = (locale, key)
        with self._lock:
            level = self._cache.get(cache_key)
            if level is None:
                self._misses += 1
                return None
            self._cache.move_to_end(cache_key)
            self._hits += 1
            return level

    def put(self, locale: str, key: Key, level: CoverageLevel) -> None:
        """Store a level, evicting the least recently used entry when full."""
        cache_key = (locale, key)
        with self._lock:
            if cache_key in self._cache:
                self._cache.move_to_end(cache_key)
            elif self._maxsize is not None and len(self._cache) >= self._maxsize:
                self._cache.popitem(last=False)
            self._cache[cache_key] = level

    def clear(self) -> None:
        """Drop all entries and reset metrics."""
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> dict[str, int | float | None]:
        """Current metrics.

        Returns:
            Dict with keys size, maxsize, hits, misses and hit_rate
            (percentage, 0.0-100.0). maxsize is None when unbounded.
        """
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0
            return {
                "size": len(self._cache),
                "maxsize": self._maxsize,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    @property
    def maxsize(self) -> int | None:
        """Maximum cache size, or None when unbounded."""
        return self._maxsize

    @property
    def hits(self) -> int:
        """Number of cache hits."""
        with self._lock:
            return self._hits

    @property
    def misses(self) -> int:
        """Number of cache misses."""
        with self._lock:
            return self._misses
