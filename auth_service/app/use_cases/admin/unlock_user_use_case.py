"""
Unlock User Use Case

Administrator override of the login lockout.
"""

from uuid import UUID

from pydantic import BaseModel

from auth_service.app.services.lockout_policy import LockoutPolicy
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.base import utcnow
from auth_service.domain.entities import AuditEvent
from auth_service.libs.result import Error, Result, Return


class UnlockUserResponse(BaseModel):
    """Response for unlock user use case"""

    user_id: str
    status: str
    message: str


class UnlockUserUseCase:
    """
    Use case for unlocking a user account.

    Business Rules:
    - Clears failed_login_attempts, locked_until and last_failed_login_at
    - Works whether or not the account is currently locked
    - Audit event created with action=account_unlocked
    """

    def __init__(self, uow: UnitOfWork, lockout_policy: LockoutPolicy):
        self.uow = uow
        self.lockout_policy = lockout_policy

    async def execute(self, user_id: UUID) -> Result[UnlockUserResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            was_locked = self.lockout_policy.is_locked(user)
            self.lockout_policy.unlock(user)
            user.updated_at = utcnow()
            await self.uow.users.update(user)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="account_unlocked",
                    event_metadata={"was_locked": was_locked},
                )
            )
            await self.uow.commit()

        return Return.ok(
            UnlockUserResponse(
                user_id=str(user_id),
                status="unlocked",
                message="User account unlocked successfully",
            )
        )
