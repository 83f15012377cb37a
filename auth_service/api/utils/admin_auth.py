"""
Admin API Key Authentication

Validates admin API keys for account administration and the OAuth2 bridge.
"""

import hmac

from fastapi import Depends, Header, status

from auth_service.api.error import ClientError
from auth_service.depends import get_config
from auth_service.libs.result import Error


async def verify_admin_api_key(
    x_admin_api_key: str = Header(None), config=Depends(get_config)
):
    """
    Verify admin API key from X-Admin-API-Key header.

    Service-to-service auth, separate from user JWT authentication.

    Raises:
        ClientError: 401 if key is missing or invalid

    Returns:
        True if valid
    """
    if not x_admin_api_key:
        raise ClientError(
            Error("UNAUTHORIZED", "Admin API key required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    if not config.ADMIN_API_KEY or not hmac.compare_digest(
        x_admin_api_key.encode(), str(config.ADMIN_API_KEY).encode()
    ):
        raise ClientError(
            Error("INVALID_API_KEY", "Invalid admin API key"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return True
