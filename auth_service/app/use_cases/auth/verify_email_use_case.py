"""
Verify Email Use Case

Handles email verification via the emailed 6-digit code.
"""

from auth_service.app.services.email_sender import IEmailSender
from auth_service.app.services.single_use_codes import (
    EmailVerificationCodeService,
    VerificationOutcome,
)
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.entities import AuditEvent
from auth_service.libs.result import Error, Result, Return
from .dtos import VerifyEmailResponse


class VerifyEmailUseCase:
    """
    Use case for email verification.

    Business Rules:
    - Only the latest code issued to the user is checked
    - Code must be unused and unexpired (15 minutes)
    - Three wrong guesses kill the code, a new one must be requested
    - Success activates the account and sends the welcome email
    - A code that was already used is rejected, even for verified users
    - Failed attempts are persisted even though the request fails
    """

    def __init__(
        self,
        uow: UnitOfWork,
        verification_codes: EmailVerificationCodeService,
        email_sender: IEmailSender,
    ):
        self.uow = uow
        self.verification_codes = verification_codes
        self.email_sender = email_sender

    async def execute(self, email: str, code: str) -> Result[VerifyEmailResponse]:
        """
        Execute email verification use case.

        Args:
            email: Email address the code was sent to
            code: 6-digit code from the email

        Returns:
            Result with verification status, or Error

        Errors:
            - INVALID_CODE: Unknown user, wrong, used or expired code
            - ATTEMPTS_EXCEEDED: Too many wrong guesses for the current code
        """
        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                return Return.err(
                    Error("INVALID_CODE", "Invalid or expired verification code")
                )

            outcome = await self.verification_codes.verify(user.id, code)

            if outcome == VerificationOutcome.SUCCESS:
                audit = AuditEvent(
                    user_id=user.id,
                    action="email_verified",
                    event_metadata={"email": user.email}
                )
                await self.uow.audit_events.create(audit)

            # Persist the outcome, including a counted failed attempt
            await self.uow.commit()

        if outcome == VerificationOutcome.ATTEMPTS_EXCEEDED:
            return Return.err(
                Error(
                    "ATTEMPTS_EXCEEDED",
                    "Too many failed attempts. Please request a new verification code."
                )
            )
        if outcome != VerificationOutcome.SUCCESS:
            return Return.err(
                Error("INVALID_CODE", "Invalid or expired verification code")
            )

        await self.email_sender.send_welcome(user.email, user.full_name)

        return Return.ok(VerifyEmailResponse(
            status="verified",
            message="Email successfully verified"
        ))
