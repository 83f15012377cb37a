"""Admin use cases for system administration operations."""

from .unlock_user_use_case import UnlockUserUseCase, UnlockUserResponse
from .get_lock_status_use_case import GetLockStatusUseCase, LockStatusResponse
from .purge_expired_tokens_use_case import (
    PurgeExpiredTokensUseCase,
    PurgeExpiredTokensResponse,
)

__all__ = [
    "UnlockUserUseCase",
    "UnlockUserResponse",
    "GetLockStatusUseCase",
    "LockStatusResponse",
    "PurgeExpiredTokensUseCase",
    "PurgeExpiredTokensResponse",
]
