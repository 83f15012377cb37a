from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from auth_service.app.repositories.email_verification_code_repository import (
    IEmailVerificationCodeRepository,
)
from auth_service.domain.entities import EmailVerificationCode


class EmailVerificationCodeRepository(IEmailVerificationCodeRepository):
    """EmailVerificationCode repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, code: EmailVerificationCode) -> EmailVerificationCode:
        """Create a new verification code"""
        self.session.add(code)
        await self.session.flush()
        await self.session.refresh(code)
        return code

    async def get_latest_by_user_id(self, user_id: UUID) -> Optional[EmailVerificationCode]:
        """Get the most recently issued code for a user"""
        stmt = (
            select(EmailVerificationCode)
            .where(EmailVerificationCode.user_id == user_id)
            .order_by(EmailVerificationCode.created_at.desc())
            .limit(1)
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def update(self, code: EmailVerificationCode) -> EmailVerificationCode:
        """Update existing verification code"""
        self.session.add(code)
        await self.session.flush()
        await self.session.refresh(code)
        return code
