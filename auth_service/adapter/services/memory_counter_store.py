import asyncio
import time
from typing import Callable, Dict, Tuple

from auth_service.app.services.counter_store import ICounterStore


class InMemoryCounterStore(ICounterStore):
    """
    Process-local counters for single-instance deployments and tests.

    Entries are (count, expires_at) against the injected monotonic clock;
    expired entries are dropped lazily on access.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._counters: Dict[str, Tuple[int, float]] = {}
        self._lock = asyncio.Lock()

    def _live(self, key: str, now: float):
        entry = self._counters.get(key)
        if entry is not None and entry[1] <= now:
            del self._counters[key]
            return None
        return entry

    async def increment(self, key: str, ttl_seconds: int) -> int:
        async with self._lock:
            now = self._clock()
            entry = self._live(key, now)
            if entry is None:
                self._counters[key] = (1, now + ttl_seconds)
                return 1
            count = entry[0] + 1
            self._counters[key] = (count, entry[1])
            return count

    async def get(self, key: str) -> int:
        async with self._lock:
            entry = self._live(key, self._clock())
            return entry[0] if entry else 0

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._counters.pop(key, None)

    async def close(self) -> None:
        self._counters.clear()
