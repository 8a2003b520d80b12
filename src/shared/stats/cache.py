"""In-memory TTL cache for computed YearStats."""

import logging
import threading
import time
from collections.abc import Callable

from ..models import YearStats

logger = logging.getLogger(__name__)

CacheKey = tuple[int, int]  # (athlete id, year)


class StatsCache:
    """
    Caches YearStats per (athlete id, year) for a fixed time-to-live.

    The engine is stateless; this layer only avoids refetching a year of
    activities on every request.
    """

    def __init__(
        self,
        ttl_seconds: float = 3600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the cache.

        Args:
            ttl_seconds: How long an entry stays valid
            clock: Time source in seconds (injectable for tests)
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[CacheKey, tuple[float, YearStats]] = {}
        self._lock = threading.Lock()

    def get(self, athlete_id: int, year: int) -> YearStats | None:
        """Return cached stats, or None when missing or expired."""
        key = (athlete_id, year)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, stats = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                logger.debug(f"Stats cache entry expired for {key}")
                return None
            return stats

    def set(self, stats: YearStats) -> None:
        """Store stats under their athlete id and year."""
        key = (stats.athlete.id, stats.year)
        with self._lock:
            self._entries[key] = (self._clock(), stats)

    def invalidate(self, athlete_id: int, year: int | None = None) -> None:
        """Drop one year for an athlete, or all of the athlete's years."""
        with self._lock:
            for key in list(self._entries):
                if key[0] == athlete_id and (year is None or key[1] == year):
                    del self._entries[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
