"""
Request Password Reset Use Case

Handles generating and sending password reset tokens.
"""

from auth_service.app.services.email_sender import IEmailSender
from auth_service.app.services.single_use_codes import PasswordResetTokenService
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.entities import AuditEvent
from auth_service.libs.result import Result, Return
from .dtos import RequestPasswordResetResponse


class RequestPasswordResetUseCase:
    """
    Use case for requesting password reset.

    Business Rules:
    - Generate cryptographically secure token, SHA-256 hash stored
    - Token expires in 4 hours (configurable)
    - Issuing a token supersedes earlier ones for the same user
    - No email enumeration (same response for valid/invalid emails)
    - Audit event created for security tracking
    """

    def __init__(
        self,
        uow: UnitOfWork,
        reset_tokens: PasswordResetTokenService,
        email_sender: IEmailSender,
    ):
        self.uow = uow
        self.reset_tokens = reset_tokens
        self.email_sender = email_sender

    async def execute(self, email: str) -> Result[RequestPasswordResetResponse]:
        """
        Execute request password reset use case.

        Args:
            email: User's email address

        Returns:
            Result with reset status

        Note:
            For security (no email enumeration), always returns success
            even if email doesn't exist. However, only generates token
            if email exists.
        """
        response = RequestPasswordResetResponse(
            status="sent",
            message="If the email exists, a password reset link has been sent",
        )

        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                return Return.ok(response)

            reset_token = await self.reset_tokens.generate(user.id)

            audit_event = AuditEvent(
                user_id=user.id,
                action="password_reset_requested",
                event_metadata={"email": user.email},
            )
            await self.uow.audit_events.create(audit_event)

            # Commit transaction
            await self.uow.commit()

        # The plain token only ever leaves through the email
        await self.email_sender.send_password_reset(user.email, user.full_name, reset_token)

        return Return.ok(response)
