"""CacheCoordinator - Read-through cache with explicit invalidation."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Hashable
from typing import TypeVar

from catalogo.cache.models import CacheRegion, CacheStats

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


class CacheCoordinator:
    """Shared read-through cache keyed by (region, key).

    Values must be immutable (records, tuples of records): an entry is only
    ever replaced as a whole, so readers never observe partial state.

    Each region, and each key with a load in flight, carries a generation
    counter that invalidation bumps. A load that started before an
    invalidation of its key or region is returned to its caller but not
    stored, so a slow reader can never put a pre-write value back after the
    writer invalidated it. Key counters are dropped once the last load of
    that key finishes.
    """

    def __init__(self, enabled: bool = True) -> None:
        """Initialize an empty cache.

        Args:
            enabled: When False, get_or_load always calls the loader.
        """
        self.enabled = enabled
        self._lock = threading.Lock()
        self._entries: dict[CacheRegion, dict[Hashable, object]] = {
            region: {} for region in CacheRegion
        }
        self._region_generations: dict[CacheRegion, int] = {region: 0 for region in CacheRegion}
        self._key_generations: dict[tuple[CacheRegion, Hashable], int] = {}
        self._loads_in_flight: dict[tuple[CacheRegion, Hashable], int] = {}
        self._stats = CacheStats()

    def get_or_load(self, region: CacheRegion, key: Hashable, loader: Callable[[], T]) -> T:
        """Return the cached value, or load, store and return it.

        Concurrent misses on the same key may each call the loader. None
        results are returned but never cached.

        Args:
            region: Cache region of the query.
            key: Key within the region.
            loader: Zero-argument call into the store.

        Returns:
            The cached or freshly loaded value.
        """
        if not self.enabled:
            return loader()

        with self._lock:
            cached = self._entries[region].get(key, _MISSING)
            if cached is not _MISSING:
                self._stats.hits += 1
                return cached  # type: ignore[return-value]
            self._stats.misses += 1
            token = self._begin_load(region, key)

        logger.debug("Cache miss %s[%s]", region, key)
        try:
            value = loader()
        except BaseException:
            with self._lock:
                self._end_load(region, key)
            raise

        with self._lock:
            current = self._generation(region, key)
            self._end_load(region, key)
            if value is None:
                return value
            if current == token:
                self._entries[region][key] = value
            else:
                self._stats.discarded_loads += 1
                logger.debug("Discarded load of %s[%s] invalidated mid-load", region, key)
        return value

    def peek(self, region: CacheRegion, key: Hashable) -> object | None:
        """Return the cached value without loading, or None."""
        with self._lock:
            return self._entries[region].get(key)

    def invalidate(self, region: CacheRegion, key: Hashable) -> None:
        """Remove one entry from a region."""
        with self._lock:
            gen_key = (region, key)
            if gen_key in self._loads_in_flight:
                self._key_generations[gen_key] += 1
            if self._entries[region].pop(key, _MISSING) is not _MISSING:
                self._stats.evictions += 1
        logger.debug("Invalidated %s[%s]", region, key)

    def invalidate_all(self, region: CacheRegion) -> None:
        """Remove every entry of a region."""
        with self._lock:
            self._region_generations[region] += 1
            entries = self._entries[region]
            self._stats.evictions += len(entries)
            entries.clear()
        logger.debug("Invalidated all of %s", region)

    def clear(self) -> None:
        """Drop every entry and reset the counters."""
        with self._lock:
            for region in CacheRegion:
                self._region_generations[region] += 1
                self._entries[region].clear()
            self._stats = CacheStats()

    def stats(self) -> CacheStats:
        """Get a snapshot of the cache counters."""
        with self._lock:
            return CacheStats(
                hits=self._stats.hits,
                misses=self._stats.misses,
                evictions=self._stats.evictions,
                discarded_loads=self._stats.discarded_loads,
                size=sum(len(entries) for entries in self._entries.values()),
            )

    def _generation(self, region: CacheRegion, key: Hashable) -> tuple[int, int]:
        return self._region_generations[region], self._key_generations.get((region, key), 0)

    def _begin_load(self, region: CacheRegion, key: Hashable) -> tuple[int, int]:
        gen_key = (region, key)
        self._loads_in_flight[gen_key] = self._loads_in_flight.get(gen_key, 0) + 1
        self._key_generations.setdefault(gen_key, 0)
        return self._generation(region, key)

    def _end_load(self, region: CacheRegion, key: Hashable) -> None:
        gen_key = (region, key)
        remaining = self._loads_in_flight[gen_key] - 1
        if remaining:
            self._loads_in_flight[gen_key] = remaining
        else:
            del self._loads_in_flight[gen_key]
            del self._key_generations[gen_key]

    def tracked_keys(self) -> int:
        """Number of keys with a load in flight."""
        with self._lock:
            return len(self._key_generations)
