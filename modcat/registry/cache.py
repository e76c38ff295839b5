"""Lookup cache — time-bounded memoization of module scan results."""

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable

DEFAULT_TTL = 5 * 60  # seconds


class LookupCache:
    """Per-key cache whose entries expire a fixed TTL after insertion.

    Expired entries are evicted when read and never returned. There is no
    capacity bound; size is bounded by the number of repositories.
    """

    def __init__(self, ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._inflight: dict[str, asyncio.Future] = {}

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None on a miss or an expired entry."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        stamped_at, value = entry
        if self._clock() - stamped_at >= self.ttl:
            del self._entries[key]
            return None
        return value

    def put(self, key: str, value: Any) -> None:
        """Store a value, replacing any existing entry and restarting its TTL."""
        self._entries[key] = (self._clock(), value)

    def __len__(self) -> int:
        return len(self._entries)

    async def single_flight(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Run ``loader`` once per key while a load is in flight.

        Concurrent callers for the same key await the same pending result
        instead of issuing duplicate fetches.
        """
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(loader())
            self._inflight[key] = task
            task.add_done_callback(lambda _: self._inflight.pop(key, None))
        return await asyncio.shield(task)
