"""Search term highlighting with a bounded cache.

The cache key is the first ``key_prefix_length`` characters of the text plus
the full query. Two long texts that share that prefix and are highlighted with
the same query map to the same entry, so the second one is served the first
one's markup. Keys stay small regardless of document size.

Eviction runs on insert only: expired entries are purged first, then the least
accessed entry is dropped if the cache is still full.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Callable, Dict, Optional

from notelens.core.models import CacheStats, HighlightCacheEntry

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100
DEFAULT_TTL_SECONDS = 5 * 60
DEFAULT_KEY_PREFIX = 100


class HighlightEngine:
    """Wraps case-insensitive literal query matches in a marker span."""

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        key_prefix_length: int = DEFAULT_KEY_PREFIX,
        css_class: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if capacity <= 0:
            raise ValueError("capacity must be greater than zero")
        self.capacity = capacity
        self.ttl_seconds = ttl_seconds
        self.key_prefix_length = key_prefix_length
        self._clock = clock
        self._cache: Dict[str, HighlightCacheEntry] = {}
        self._stats = CacheStats()
        if css_class:
            self._open_tag = f'<mark class="{css_class}">'
        else:
            self._open_tag = "<mark>"
        self._close_tag = "</mark>"

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: str) -> bool:
        return key in self._cache

    def cache_key(self, text: str, query: str) -> str:
        return f"{text[:self.key_prefix_length]}:{query}"

    def render(self, text: str, query: str, suppressed: bool = False) -> str:
        """Return ``text`` with every occurrence of ``query`` marked.

        Empty queries and suppressed highlights return the text untouched
        without consulting the cache.
        """
        if suppressed or not query.strip():
            return text

        key = self.cache_key(text, query)
        now = self._clock()

        entry = self._cache.get(key)
        if entry is not None:
            if now - entry.last_access > self.ttl_seconds:
                del self._cache[key]
                self._stats.expirations += 1
            else:
                entry.access_count += 1
                entry.last_access = now
                self._stats.hits += 1
                return entry.markup

        self._stats.misses += 1
        markup = self._mark(text, query)
        self._insert(key, markup, now)
        return markup

    def clear(self) -> None:
        """Drop every cached entry."""
        if self._cache:
            logger.debug(f"Clearing {len(self._cache)} highlight cache entries")
        self._cache.clear()

    def stats(self) -> CacheStats:
        return CacheStats(
            size=len(self._cache),
            hits=self._stats.hits,
            misses=self._stats.misses,
            evictions=self._stats.evictions,
            expirations=self._stats.expirations,
        )

    def _mark(self, text: str, query: str) -> str:
        pattern = re.compile(re.escape(query), re.IGNORECASE)
        return pattern.sub(lambda m: f"{self._open_tag}{m.group(0)}{self._close_tag}", text)

    def _insert(self, key: str, markup: str, now: float) -> None:
        self._purge_expired(now)

        if len(self._cache) >= self.capacity:
            self._evict_least_accessed()

        self._cache[key] = HighlightCacheEntry(key=key, markup=markup, last_access=now)

    def _purge_expired(self, now: float) -> None:
        expired = [
            key for key, entry in self._cache.items()
            if now - entry.last_access > self.ttl_seconds
        ]
        for key in expired:
            del self._cache[key]
        if expired:
            self._stats.expirations += len(expired)
            logger.debug(f"Purged {len(expired)} expired highlight entries")

    def _evict_least_accessed(self) -> None:
        # Ties go to the entry touched longest ago.
        victim = min(
            self._cache.values(),
            key=lambda entry: (entry.access_count, entry.last_access),
        )
        del self._cache[victim.key]
        self._stats.evictions += 1
        logger.debug(f"Evicted highlight entry (access_count={victim.access_count})")


__all__ = ["HighlightEngine", "DEFAULT_CAPACITY", "DEFAULT_TTL_SECONDS", "DEFAULT_KEY_PREFIX"]
