from typing import Optional

import redis.asyncio as aioredis

from auth_service.app.services.counter_store import ICounterStore


class RedisCounterStore(ICounterStore):
    """Redis-backed counters, increment and expiry in one Lua script"""

    # INCR, then set the TTL on the first hit or if the key somehow lost it
    _INCREMENT_SCRIPT = """
local current = redis.call('INCR', KEYS[1])
if current == 1 or redis.call('TTL', KEYS[1]) == -1 then
  redis.call('EXPIRE', KEYS[1], tonumber(ARGV[1]))
end
return current
"""

    def __init__(
        self,
        redis_url: Optional[str] = None,
        *,
        socket_timeout: float = 1.0,
        client: Optional[aioredis.Redis] = None,
    ):
        self.redis_url = redis_url
        if client is None:
            client = aioredis.from_url(
                redis_url,
                decode_responses=True,
                socket_timeout=socket_timeout,
                socket_connect_timeout=socket_timeout,
            )
        self.client = client
        self._increment = self.client.register_script(self._INCREMENT_SCRIPT)

    async def increment(self, key: str, ttl_seconds: int) -> int:
        result = await self._increment(keys=[key], args=[max(1, int(ttl_seconds))])
        return int(result)

    async def get(self, key: str) -> int:
        value = await self.client.get(key)
        return int(value) if value is not None else 0

    async def delete(self, key: str) -> None:
        await self.client.delete(key)

    async def close(self) -> None:
        await self.client.aclose()
