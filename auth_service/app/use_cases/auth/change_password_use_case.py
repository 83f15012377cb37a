"""
Change Password Use Case

Lets an authenticated user replace their password.
"""

from uuid import UUID

from auth_service.app.services.password_hasher import hash_password, verify_password
from auth_service.app.services.refresh_token_store import RefreshTokenStore
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.base import utcnow
from auth_service.domain.entities import AuditEvent, RevocationReason
from auth_service.libs.result import Error, Result, Return
from .confirm_password_reset_use_case import validate_password
from .dtos import ChangePasswordResponse


class ChangePasswordUseCase:
    """
    Use case for changing the password of the current user.

    Business Rules:
    - Current password must be verified
    - Accounts without a local password (external identity) cannot change it
    - New password must meet complexity requirements
    - All refresh tokens are revoked (reason=password_change)
    """

    def __init__(self, uow: UnitOfWork, refresh_tokens: RefreshTokenStore):
        self.uow = uow
        self.refresh_tokens = refresh_tokens

    async def execute(
        self, user_id: UUID, current_password: str, new_password: str
    ) -> Result[ChangePasswordResponse]:
        password_check = validate_password(new_password)
        if password_check.is_err():
            return password_check

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if user.password_hash is None or not verify_password(
                current_password, user.password_hash
            ):
                return Return.err(
                    Error("INVALID_PASSWORD", "Current password is incorrect")
                )

            user.password_hash = hash_password(new_password)
            user.updated_at = utcnow()
            await self.uow.users.update(user)

            revoked = await self.refresh_tokens.revoke_all_for_account(
                user.id, RevocationReason.password_change
            )

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="password_changed",
                    event_metadata={"revoked_sessions": revoked},
                )
            )
            await self.uow.commit()

        return Return.ok(
            ChangePasswordResponse(
                status="changed",
                message="Password changed. Please log in again.",
                revoked_sessions=revoked,
            )
        )
