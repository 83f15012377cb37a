from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from auth_service.domain.entities import RefreshToken, RevocationReason


class IRefreshTokenRepository(ABC):
    """RefreshToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: RefreshToken) -> RefreshToken:
        """Create a new refresh token"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[RefreshToken]:
        """Get refresh token by SHA-256 digest of its value"""
        pass

    @abstractmethod
    async def revoke_if_active(self, token_id: UUID, reason: RevocationReason) -> bool:
        """
        Revoke a token only if it is still unrevoked and unexpired.

        Returns True if this call performed the revocation. Of two concurrent
        callers on the same token, exactly one sees True.
        """
        pass

    @abstractmethod
    async def revoke_all_by_user_id(self, user_id: UUID, reason: RevocationReason) -> int:
        """Revoke all tokens for a user. Returns count of revoked tokens."""
        pass

    @abstractmethod
    async def delete_expired(self) -> int:
        """Delete expired tokens. Returns count of deleted rows."""
        pass
