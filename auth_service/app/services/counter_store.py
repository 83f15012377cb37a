from abc import ABC, abstractmethod


class ICounterStore(ABC):
    """Atomic expiring counters - application layer"""

    @abstractmethod
    async def increment(self, key: str, ttl_seconds: int) -> int:
        """
        Increment the counter at key and return the new value.

        The TTL is applied when the key is created and is not refreshed by
        later increments, so a window is fixed from its first hit.
        """
        pass

    @abstractmethod
    async def get(self, key: str) -> int:
        """Current value of the counter, 0 if absent or expired"""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the counter"""
        pass

    async def close(self) -> None:
        """Release connections held by the store"""
        pass
