from typing import Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from auth_service.app.repositories.refresh_token_repository import IRefreshTokenRepository
from auth_service.domain.base import utcnow
from auth_service.domain.entities import RefreshToken, RevocationReason


class RefreshTokenRepository(IRefreshTokenRepository):
    """RefreshToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: RefreshToken) -> RefreshToken:
        """Create a new refresh token"""
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get_by_token_hash(self, token_hash: str) -> Optional[RefreshToken]:
        """
        Get refresh token by digest.

        We don't filter by revoked/expired here - that's checked by the caller
        so it can log the precise rejection reason.
        """
        stmt = select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def revoke_if_active(self, token_id: UUID, reason: RevocationReason) -> bool:
        """Compare-and-swap revocation of a single token"""
        now = utcnow()
        stmt = (
            update(RefreshToken)
            .where(
                RefreshToken.id == token_id,
                RefreshToken.revoked == False,
                RefreshToken.expires_at > now,
            )
            .values(revoked=True, revoked_at=now, revoked_reason=reason)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def revoke_all_by_user_id(self, user_id: UUID, reason: RevocationReason) -> int:
        """Revoke all active tokens for a user"""
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.revoked == False)
            .values(revoked=True, revoked_at=utcnow(), revoked_reason=reason)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def delete_expired(self) -> int:
        """Delete tokens past their expiry"""
        stmt = delete(RefreshToken).where(RefreshToken.expires_at <= utcnow())
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
