import logging

from auth_service.app.services.email_sender import IEmailSender
from auth_service.app.utils.masking import mask_secret

logger = logging.getLogger(__name__)


class LoggingEmailSender(IEmailSender):
    """
    Email sender that records deliveries in the log instead of sending them.

    Stands in for the templated mail delivery service; secrets are masked.
    """

    async def send_verification_code(self, email: str, name: str, code: str) -> None:
        logger.info(
            "Verification code email to %s (%s): code=%s", email, name, mask_secret(code)
        )

    async def send_password_reset(self, email: str, name: str, token: str) -> None:
        logger.info(
            "Password reset email to %s (%s): token=%s", email, name, mask_secret(token)
        )

    async def send_welcome(self, email: str, name: str) -> None:
        logger.info("Welcome email to %s (%s)", email, name)
