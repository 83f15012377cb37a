"""
Rate Limiter

Fixed-window request counting per (operation, identifier) on top of an
ICounterStore. Counter store failures never block a request.
"""

import asyncio
import logging
from dataclasses import dataclass

from auth_service.app.services.counter_store import ICounterStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitRule:
    """Allowed number of requests per window"""

    limit: int
    window_seconds: int


DEFAULT_RATE_LIMITS = {
    "login": RateLimitRule(limit=5, window_seconds=300),
    "register": RateLimitRule(limit=3, window_seconds=3600),
    "verify-email": RateLimitRule(limit=5, window_seconds=900),
    "resend-verification": RateLimitRule(limit=3, window_seconds=3600),
    "forgot-password": RateLimitRule(limit=3, window_seconds=3600),
    "reset-password": RateLimitRule(limit=5, window_seconds=900),
}


class RateLimiter:
    """
    Fixed-window rate limiter.

    Business Rules:
    - Key format: rate_limit:{prefix}:{identifier}
    - Window starts at the first request and is not extended by later ones
    - Requests 1..limit are allowed, limit+1 onwards rejected until the window ends
    - Store errors and timeouts are fail-open (allowed, logged)
    """

    def __init__(self, store: ICounterStore, timeout_seconds: float = 0.5):
        self.store = store
        self.timeout_seconds = timeout_seconds

    @staticmethod
    def key(prefix: str, identifier: str) -> str:
        return f"rate_limit:{prefix}:{identifier}"

    async def is_allowed(
        self, prefix: str, identifier: str, limit: int, window_seconds: int
    ) -> bool:
        """
        Count this request and report whether it is within the limit.

        Args:
            prefix: Operation name, e.g. "login"
            identifier: Caller identity, usually the client IP
            limit: Requests allowed per window
            window_seconds: Window length

        Returns:
            True if the request may proceed
        """
        key = self.key(prefix, identifier)
        try:
            count = await asyncio.wait_for(
                self.store.increment(key, window_seconds), self.timeout_seconds
            )
        except Exception:
            logger.warning(
                "Rate limit check failed for %s, allowing request", prefix, exc_info=True
            )
            return True

        if count > limit:
            logger.info(
                "Rate limit exceeded for %s (%d/%d in %ds)",
                prefix, count, limit, window_seconds,
            )
            return False
        return True

    async def check(self, prefix: str, identifier: str, rule: RateLimitRule) -> bool:
        return await self.is_allowed(prefix, identifier, rule.limit, rule.window_seconds)

    async def reset(self, prefix: str, identifier: str) -> None:
        """Clear the counter, e.g. after an administrator intervenes"""
        try:
            await asyncio.wait_for(
                self.store.delete(self.key(prefix, identifier)), self.timeout_seconds
            )
        except Exception:
            logger.warning("Rate limit reset failed for %s", prefix, exc_info=True)

    async def current_count(self, prefix: str, identifier: str) -> int:
        """Requests counted in the current window, 0 if the store is unavailable"""
        try:
            return await asyncio.wait_for(
                self.store.get(self.key(prefix, identifier)), self.timeout_seconds
            )
        except Exception:
            logger.warning("Rate limit count failed for %s", prefix, exc_info=True)
            return 0
