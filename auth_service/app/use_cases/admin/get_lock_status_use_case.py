from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from auth_service.app.services.lockout_policy import LockoutPolicy
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.libs.result import Error, Result, Return


class LockStatusResponse(BaseModel):
    """Lockout state of a user account"""

    user_id: str
    locked: bool
    failed_login_attempts: int
    remaining_attempts: int
    locked_until: Optional[str] = None
    remaining_lock_seconds: int = 0


class GetLockStatusUseCase:
    """Report the lockout state of an account for administrators"""

    def __init__(self, uow: UnitOfWork, lockout_policy: LockoutPolicy):
        self.uow = uow
        self.lockout_policy = lockout_policy

    async def execute(self, user_id: UUID) -> Result[LockStatusResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            locked = self.lockout_policy.is_locked(user)
            return Return.ok(
                LockStatusResponse(
                    user_id=str(user.id),
                    locked=locked,
                    failed_login_attempts=user.failed_login_attempts,
                    remaining_attempts=self.lockout_policy.remaining_attempts(user),
                    locked_until=user.locked_until.isoformat() if locked else None,
                    remaining_lock_seconds=self.lockout_policy.remaining_lock_seconds(user),
                )
            )
