"""
External Login Use Case

Turns an identity verified by an external provider (OAuth2) into a session.
"""

import logging

from auth_service.app.services.refresh_token_store import RefreshTokenStore
from auth_service.app.services.token_issuer import ITokenIssuer
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.base import utcnow
from auth_service.domain.entities import AuditEvent, RevocationReason, User, UserRole, UserStatus
from auth_service.libs.result import Error, Result, Return
from .dtos import ExternalLoginCommand, LoginResponse
from .register_dto import UserInfo

logger = logging.getLogger(__name__)


class ExternalLoginUseCase:
    """
    Use case for login through an external identity provider.

    Business Rules:
    - The provider has already verified the email
    - Unknown email: create an active, verified user without a local password
    - Known email: mark verified and activate if still pending
    - Suspended or deleted accounts are refused
    - Lockout does not apply, there is no local credential to guess
    - Issues tokens exactly like a password login
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_issuer: ITokenIssuer,
        refresh_tokens: RefreshTokenStore,
    ):
        self.uow = uow
        self.token_issuer = token_issuer
        self.refresh_tokens = refresh_tokens

    async def execute(self, command: ExternalLoginCommand) -> Result[LoginResponse]:
        email = command.email.strip().lower()

        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                user = User(
                    email=email,
                    password_hash=None,
                    first_name=command.first_name,
                    last_name=command.last_name,
                    role=UserRole.user,
                    status=UserStatus.active,
                    auth_provider=command.provider,
                    is_verified=True,
                )
                user = await self.uow.users.create(user)
                logger.info("Created %s user %s", command.provider.value, user.id)
            elif user.status in (UserStatus.suspended, UserStatus.deleted):
                return Return.err(Error("USER_DISABLED", "User account is disabled"))
            else:
                user.is_verified = True
                if user.status == UserStatus.pending_verification:
                    user.status = UserStatus.active

            user.last_login_at = utcnow()
            user.updated_at = user.last_login_at
            await self.uow.users.update(user)

            await self.refresh_tokens.revoke_all_for_account(user.id, RevocationReason.login)
            issued = await self.refresh_tokens.issue(user.id)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="external_login",
                    event_metadata={"provider": command.provider.value},
                )
            )
            await self.uow.commit()

        access_token = self.token_issuer.issue_access_token(
            user.id, user.email, user.role.value
        )

        return Return.ok(
            LoginResponse(
                access_token=access_token,
                refresh_token=issued.value,
                expires_in=self.token_issuer.access_token_ttl_seconds,
                user=UserInfo.from_user(user),
            )
        )
