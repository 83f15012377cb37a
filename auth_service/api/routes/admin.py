"""
Admin API Routes - Account Administration Endpoints

Authentication is via Admin API Key, not user JWTs.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from auth_service.api.error import raise_for_error
from auth_service.api.utils.admin_auth import verify_admin_api_key
from auth_service.app.services.lockout_policy import LockoutPolicy
from auth_service.app.services.rate_limiter import RateLimiter
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.app.use_cases.admin import (
    GetLockStatusUseCase,
    LockStatusResponse,
    PurgeExpiredTokensResponse,
    PurgeExpiredTokensUseCase,
    UnlockUserResponse,
    UnlockUserUseCase,
)
from auth_service.depends import get_lockout_policy, get_rate_limiter, get_unit_of_work

router = APIRouter(
    prefix="/admin", tags=["Admin"], dependencies=[Depends(verify_admin_api_key)]
)


@router.post(
    "/users/{user_id}/unlock",
    status_code=status.HTTP_200_OK,
    response_model=UnlockUserResponse,
)
async def unlock_user(
    user_id: UUID,
    uow: UnitOfWork = Depends(get_unit_of_work),
    lockout_policy: LockoutPolicy = Depends(get_lockout_policy),
):
    """
    Unlock User

    Clears the failed login counter and any active lock.

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 404 Not Found: USER_NOT_FOUND
    """
    use_case = UnlockUserUseCase(uow, lockout_policy)
    result = await use_case.execute(user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get(
    "/users/{user_id}/lock-status",
    status_code=status.HTTP_200_OK,
    response_model=LockStatusResponse,
)
async def lock_status(
    user_id: UUID,
    uow: UnitOfWork = Depends(get_unit_of_work),
    lockout_policy: LockoutPolicy = Depends(get_lockout_policy),
):
    """
    Lock Status

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 404 Not Found: USER_NOT_FOUND
    """
    use_case = GetLockStatusUseCase(uow, lockout_policy)
    result = await use_case.execute(user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/refresh-tokens/purge-expired",
    status_code=status.HTTP_200_OK,
    response_model=PurgeExpiredTokensResponse,
)
async def purge_expired_refresh_tokens(uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Purge Expired Refresh Tokens

    Requires: X-Admin-API-Key header
    """
    use_case = PurgeExpiredTokensUseCase(uow)
    result = await use_case.execute()

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class RateLimitStatusResponse(BaseModel):
    """Requests counted in the current window for one caller"""

    prefix: str
    identifier: str
    count: int


@router.get(
    "/rate-limits/{prefix}/{identifier}",
    status_code=status.HTTP_200_OK,
    response_model=RateLimitStatusResponse,
)
async def rate_limit_status(
    prefix: str, identifier: str, rate_limiter: RateLimiter = Depends(get_rate_limiter)
):
    """
    Rate Limit Status

    Reports 0 when the counter store is unavailable.

    Requires: X-Admin-API-Key header
    """
    count = await rate_limiter.current_count(prefix, identifier)
    return RateLimitStatusResponse(prefix=prefix, identifier=identifier, count=count)


@router.delete("/rate-limits/{prefix}/{identifier}", status_code=status.HTTP_204_NO_CONTENT)
async def reset_rate_limit(
    prefix: str, identifier: str, rate_limiter: RateLimiter = Depends(get_rate_limiter)
):
    """
    Reset Rate Limit

    Clears the window for one caller, e.g. after a support request.

    Requires: X-Admin-API-Key header
    """
    await rate_limiter.reset(prefix, identifier)
