"""
Resend Verification Code Use Case

Issues a fresh verification code, superseding any earlier one.
"""

from auth_service.app.services.email_sender import IEmailSender
from auth_service.app.services.single_use_codes import EmailVerificationCodeService
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.libs.result import Result, Return
from .dtos import ResendVerificationResponse


class ResendVerificationUseCase:
    """
    Use case for resending the email verification code.

    Business Rules:
    - If email is not verified, issue a new 6-digit code (15 minutes)
    - The new code supersedes the old one, which can no longer be used
    - If email is already verified, return success (no email sent)
    - Returns same response for valid/invalid emails (no enumeration)
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

    async def execute(self, email: str) -> Result[ResendVerificationResponse]:
        """
        Execute resend verification use case.

        Args:
            email: User's email address

        Returns:
            Result with resend status
        """
        sent = ResendVerificationResponse(
            status="sent",
            message="If the email exists, a verification code has been sent"
        )

        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            # No email enumeration - return success even if user not found
            if user is None:
                return Return.ok(sent)

            if user.is_verified:
                return Return.ok(ResendVerificationResponse(
                    status="already_verified",
                    message="Email is already verified"
                ))

            code = await self.verification_codes.generate(user.id)
            await self.uow.commit()

        await self.email_sender.send_verification_code(user.email, user.full_name, code)

        return Return.ok(sent)
