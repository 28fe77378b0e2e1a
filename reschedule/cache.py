"""TTL cache for successful upstream responses."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Awaitable, Callable

import httpx
from cachetools import TLRUCache

LOGGER = logging.getLogger(__name__)

GROUPS_TTL = timedelta(hours=12)
SCHEDULE_TTL = timedelta(hours=6)


@dataclass(frozen=True, slots=True)
class _Entry:
    response: httpx.Response
    ttl_seconds: float


def _time_to_use(_key: str, entry: _Entry, now: float) -> float:
    return now + entry.ttl_seconds


class ResponseCache:
    """Keyed store of upstream responses with a per-entry time-to-live.

    Only 2xx responses are stored. Expired entries are dropped lazily on the
    next access; size bounding is left to the underlying ``TLRUCache``.
    Concurrent misses on one key are last-writer-wins.
    """

    def __init__(self, maxsize: int = 256, timer: Callable[[], float] = time.monotonic) -> None:
        self._cache: TLRUCache[str, _Entry] = TLRUCache(maxsize=maxsize, ttu=_time_to_use, timer=timer)

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: str) -> bool:
        return key in self._cache

    def invalidate(self, key: str) -> None:
        self._cache.pop(key, None)

    async def get_or_fetch(
        self,
        key: str,
        ttl: timedelta,
        fetch: Callable[[], Awaitable[httpx.Response]],
    ) -> httpx.Response:
        """Return a live cached response for ``key`` or call ``fetch``.

        Exceptions raised by ``fetch`` propagate and leave the cache untouched.
        """
        entry = self._cache.get(key)
        if entry is not None:
            LOGGER.debug("Cache hit for %s", key)
            return entry.response

        response = await fetch()
        if response.is_success:
            self._cache[key] = _Entry(response=response, ttl_seconds=ttl.total_seconds())
            LOGGER.info("Caching %s (entries=%d)", key, self._cache.currsize)
        return response
