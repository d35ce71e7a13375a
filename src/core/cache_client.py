"""In-memory memoizing cache for user profile lookups."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any


logger = logging.getLogger(__name__)

Loader = Callable[[str], Awaitable[dict[str, Any] | None]]


class LoadAbandonedError(Exception):
    """The caller that started a shared lookup was cancelled before it finished."""


class ProfileCache:
    """Expiry-free read-through cache keyed by user ID.

    Concurrent misses for the same key share a single in-flight lookup.
    Missing profiles (loader returned None) are not cached, and a lookup
    that overlaps an invalidation of its key is not cached either.
    """

    def __init__(self) -> None:
        """Initialize empty cache."""
        self._data: dict[str, dict[str, Any]] = {}
        self._in_flight: dict[str, asyncio.Future[dict[str, Any] | None]] = {}
        self._generations: dict[str, int] = {}

        # Health tracking
        self._hits = 0
        self._misses = 0
        self._last_successful_operation: float | None = None

    def get_health_status(self) -> dict[str, Any]:
        """Get cache health status.

        Returns:
            Dict with entry count, hit/miss counters and in-flight lookups
        """
        return {
            "entries": len(self._data),
            "hits": self._hits,
            "misses": self._misses,
            "in_flight": len(self._in_flight),
            "last_successful_operation": self._last_successful_operation,
        }

    def peek(self, key: str) -> dict[str, Any] | None:
        """Return the cached value without loading."""
        return self._data.get(key)

    async def get_or_load(self, key: str, loader: Loader) -> dict[str, Any] | None:
        """Return the cached value, loading it once on a miss.

        If the caller that started a shared lookup is cancelled, the callers
        waiting on it start a fresh lookup instead of being cancelled too.

        Args:
            key: Cache key (user ID)
            loader: Coroutine function fetching the value for the key

        Returns:
            Cached or freshly loaded value, or None if the loader found nothing
        """
        if key in self._data:
            self._hits += 1
            logger.debug("Cache hit for key: %s", key)
            return self._data[key]

        pending = self._in_flight.get(key)
        if pending is not None:
            logger.debug("Joining in-flight lookup for key: %s", key)
            try:
                return await asyncio.shield(pending)
            except LoadAbandonedError:
                logger.debug("In-flight lookup for key %s was abandoned, retrying", key)
                return await self.get_or_load(key, loader)

        self._misses += 1
        generation = self._generations.get(key, 0)
        future: asyncio.Future[dict[str, Any] | None] = asyncio.get_running_loop().create_future()
        self._in_flight[key] = future
        try:
            value = await loader(key)
        except asyncio.CancelledError:
            future.set_exception(LoadAbandonedError(key))
            future.exception()
            raise
        except Exception as e:
            future.set_exception(e)
            # Mark retrieved so an unawaited failure does not warn
            future.exception()
            raise
        else:
            if value is not None and self._generations.get(key, 0) == generation:
                self._data[key] = value
                self._last_successful_operation = time.time()
            future.set_result(value)
            return value
        finally:
            if self._in_flight.get(key) is future:
                del self._in_flight[key]

    def set(self, key: str, value: dict[str, Any]) -> None:
        """Store a value directly."""
        self._data[key] = value
        self._last_successful_operation = time.time()

    def invalidate(self, *keys: str) -> None:
        """Drop one or more keys, including lookups still in flight for them."""
        for key in keys:
            self._data.pop(key, None)
            self._in_flight.pop(key, None)
            self._generations[key] = self._generations.get(key, 0) + 1
        logger.debug("Invalidated %d cache key(s)", len(keys))

    def clear(self) -> None:
        """Drop every cached entry."""
        for key in [*self._data, *self._in_flight]:
            self._generations[key] = self._generations.get(key, 0) + 1
        self._data.clear()
        self._in_flight.clear()
        logger.info("Profile cache cleared")


# Global profile cache instance
profile_cache = ProfileCache()
