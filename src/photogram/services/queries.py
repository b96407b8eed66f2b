"""Keyed query cache used by the view layer."""

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from photogram.services.cache import Cache

T = TypeVar("T")

_logger = logging.getLogger(__name__)


def query_key(*parts: object) -> str:
    """Serialize key parts such as ``("profile", "alice")`` to a cache key."""
    return json.dumps([str(part) for part in parts], separators=(",", ":"))


@dataclass
class QueryClient:
    """Caches query results by key and invalidates them after mutations."""

    cache: Cache
    stale_seconds: int = 300
    debug: bool = False

    async def fetch_query(
        self,
        key: tuple[object, ...],
        fn: Callable[[], Awaitable[T]],
        stale_seconds: int | None = None,
    ) -> T:
        """Return cached data for the key or run the query and cache it.

        Failed queries and ``None`` results are not cached.
        """
        cache_key = query_key(*key)
        cached = self.cache.get(cache_key)
        if cached is not None:
            if self.debug:
                _logger.info("Query cache hit: key=%s", cache_key)
            return cached  # type: ignore[return-value]

        result = await fn()
        if result is not None:
            ttl = self.stale_seconds if stale_seconds is None else stale_seconds
            self.cache.set(cache_key, result, ttl_seconds=ttl)
        return result

    def invalidate(self, *prefix: object) -> int:
        """Drop every cached query whose key starts with the prefix parts."""
        wanted = [str(part) for part in prefix]
        removed = 0
        for cache_key in self.cache.keys():
            parts = json.loads(cache_key)
            if parts[: len(wanted)] == wanted:
                self.cache.delete(cache_key)
                removed += 1
        if self.debug:
            _logger.info("Query cache invalidated: prefix=%s removed=%s", wanted, removed)
        return removed

    def clear(self) -> None:
        """Drop all cached queries, e.g. on logout."""
        self.cache.clear()
