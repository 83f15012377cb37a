"""
Logout Use Case

Ends every session of the calling user.
"""

from uuid import UUID

from auth_service.app.services.refresh_token_store import RefreshTokenStore
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.entities import AuditEvent, RevocationReason
from auth_service.libs.result import Result, Return
from .dtos import LogoutResponse


class LogoutUseCase:
    """
    Use case for logout.

    Business Rules:
    - Revokes all refresh tokens of the user (reason=logout)
    - Access tokens are not tracked and stay valid until they expire
    - Idempotent: logging out twice revokes nothing the second time
    """

    def __init__(self, uow: UnitOfWork, refresh_tokens: RefreshTokenStore):
        self.uow = uow
        self.refresh_tokens = refresh_tokens

    async def execute(self, user_id: UUID) -> Result[LogoutResponse]:
        async with self.uow:
            count = await self.refresh_tokens.revoke_all_for_account(
                user_id, RevocationReason.logout
            )

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user_id,
                    action="logout",
                    event_metadata={"revoked_sessions": count},
                )
            )
            await self.uow.commit()

        return Return.ok(LogoutResponse(status="logged_out", revoked_sessions=count))
