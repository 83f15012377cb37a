from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from auth_service.domain.entities import EmailVerificationCode


class IEmailVerificationCodeRepository(ABC):
    """EmailVerificationCode repository interface - application layer"""

    @abstractmethod
    async def create(self, code: EmailVerificationCode) -> EmailVerificationCode:
        """Create a new verification code"""
        pass

    @abstractmethod
    async def get_latest_by_user_id(self, user_id: UUID) -> Optional[EmailVerificationCode]:
        """Get the most recently issued code for a user"""
        pass

    @abstractmethod
    async def update(self, code: EmailVerificationCode) -> EmailVerificationCode:
        """Update existing verification code"""
        pass
