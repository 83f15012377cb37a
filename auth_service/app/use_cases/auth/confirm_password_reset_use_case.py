"""
Confirm Password Reset Use Case

Handles password reset confirmation with secure token validation.
"""

from auth_service.app.services.password_hasher import hash_password
from auth_service.app.services.refresh_token_store import RefreshTokenStore
from auth_service.app.services.single_use_codes import PasswordResetTokenService
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.base import utcnow
from auth_service.domain.entities import AuditEvent, RevocationReason
from auth_service.libs.result import Error, Result, Return
from .dtos import ConfirmPasswordResetResponse

MIN_PASSWORD_LENGTH = 8


def validate_password(password: str) -> Result[None]:
    """
    Validate password complexity.

    Returns:
        Result with None if valid, or Error(INVALID_PASSWORD)
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        return Return.err(
            Error(
                "INVALID_PASSWORD",
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
            )
        )
    if len(password.encode("utf-8")) > 72:
        return Return.err(
            Error("INVALID_PASSWORD", "Password must be at most 72 bytes long")
        )
    return Return.ok(None)


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming password reset.

    Business Rules:
    - Token must be the latest issued for its user, unused and unexpired
    - New password must meet complexity requirements (min 8 chars)
    - Password is hashed with bcrypt (cost factor 12)
    - All user refresh tokens are revoked (reason=password_reset)
    - Token is marked as used after successful reset
    - Audit event created for security tracking
    """

    def __init__(
        self,
        uow: UnitOfWork,
        reset_tokens: PasswordResetTokenService,
        refresh_tokens: RefreshTokenStore,
    ):
        self.uow = uow
        self.reset_tokens = reset_tokens
        self.refresh_tokens = refresh_tokens

    async def execute(self, token: str, new_password: str) -> Result[ConfirmPasswordResetResponse]:
        """
        Execute confirm password reset use case.

        Args:
            token: Plain reset token from the email
            new_password: New password

        Returns:
            Result with reset status, or Error

        Errors:
            - INVALID_PASSWORD: Password does not meet requirements
            - INVALID_TOKEN: Token unknown, superseded, used or expired
        """
        password_check = validate_password(new_password)
        if password_check.is_err():
            return password_check

        async with self.uow:
            reset_token = await self.reset_tokens.resolve(token)
            if reset_token is None:
                return Return.err(
                    Error("INVALID_TOKEN", "Invalid or expired reset token")
                )

            user = await self.uow.users.get_by_id(reset_token.user_id)
            if user is None:
                return Return.err(
                    Error("INVALID_TOKEN", "Invalid or expired reset token")
                )

            user.password_hash = hash_password(new_password)
            user.updated_at = utcnow()
            await self.uow.users.update(user)

            await self.reset_tokens.consume(reset_token)

            revoked = await self.refresh_tokens.revoke_all_for_account(
                user.id, RevocationReason.password_reset
            )

            audit_event = AuditEvent(
                user_id=user.id,
                action="password_reset_confirmed",
                event_metadata={"revoked_sessions": revoked},
            )
            await self.uow.audit_events.create(audit_event)

            # Commit transaction
            await self.uow.commit()

        return Return.ok(
            ConfirmPasswordResetResponse(
                status="reset",
                message="Password has been reset. Please log in with your new password.",
            )
        )
