# src/btcproxy/infrastructure/cache.py
import asyncio
import time
from typing import Any, Callable, Optional


class LivePriceCache:
    """
    A single-slot in-memory cache with a fixed Time-To-Live.

    Holds the last complete live-price payload and the time it was fetched.
    The slot is only ever replaced wholesale. `refresh_lock` is held by
    whoever is refreshing the slot so concurrent misses share one upstream call.
    """

    def __init__(self, ttl_seconds: int = 300, clock: Callable[[], float] = time.time):
        """
        :param ttl_seconds: How long a payload stays valid after it was stored.
        :param clock: Returns the current time in seconds. Injected by tests.
        """
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._payload: Optional[Any] = None
        self._fetched_at: float = 0.0
        self.refresh_lock = asyncio.Lock()

    def get(self) -> Optional[Any]:
        """
        Returns the cached payload if one exists and has not expired.
        An expired payload is kept in the slot but never returned.
        """
        if self._payload is None:
            return None
        if self._clock() - self._fetched_at >= self._ttl_seconds:
            return None
        return self._payload

    def set(self, payload: Any) -> None:
        self._payload = payload
        self._fetched_at = self._clock()
