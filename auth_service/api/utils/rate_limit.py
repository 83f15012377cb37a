"""
Rate limiting for anonymous endpoints, keyed by client IP.
"""

from typing import Optional

from fastapi import Depends, Request, status

from auth_service.api.error import ClientError
from auth_service.app.services.rate_limiter import RateLimiter
from auth_service.depends import get_rate_limiter
from auth_service.libs.result import Error

# Checked in order; the first usable value wins
CLIENT_IP_HEADERS = (
    "X-Forwarded-For",
    "X-Real-IP",
    "Proxy-Client-IP",
    "WL-Proxy-Client-IP",
    "HTTP_X_FORWARDED_FOR",
    "HTTP_X_FORWARDED",
    "HTTP_X_CLUSTER_CLIENT_IP",
    "HTTP_CLIENT_IP",
    "HTTP_FORWARDED_FOR",
    "HTTP_FORWARDED",
    "HTTP_VIA",
    "REMOTE_ADDR",
)


def _first_usable(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    first = value.split(",")[0].strip()
    if not first or first.lower() == "unknown":
        return None
    return first


def resolve_client_identifier(request: Request) -> str:
    """Client IP from proxy headers, falling back to the socket peer"""
    for header in CLIENT_IP_HEADERS:
        ip = _first_usable(request.headers.get(header))
        if ip:
            return ip
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit(prefix: str):
    """
    Dependency factory enforcing the configured rule for prefix.

    Raises:
        ClientError: 429 RATE_LIMIT_EXCEEDED
    """

    async def dependency(
        request: Request, limiter: RateLimiter = Depends(get_rate_limiter)
    ) -> None:
        rule = request.app.state.rate_limits[prefix]
        if not await limiter.check(prefix, resolve_client_identifier(request), rule):
            raise ClientError(
                Error("RATE_LIMIT_EXCEEDED", "Too many requests. Please try again later."),
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            )

    return dependency
