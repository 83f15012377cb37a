from abc import ABC, abstractmethod


class IEmailSender(ABC):
    """Outbound email delivery - application layer"""

    @abstractmethod
    async def send_verification_code(self, email: str, name: str, code: str) -> None:
        """Send the 6-digit email verification code"""
        pass

    @abstractmethod
    async def send_password_reset(self, email: str, name: str, token: str) -> None:
        """Send the password reset token"""
        pass

    @abstractmethod
    async def send_welcome(self, email: str, name: str) -> None:
        """Send the welcome message after verification"""
        pass
