"""
Refresh Token Store

Lifecycle of opaque refresh tokens: issue, validate-and-rotate, revoke.
"""

import asyncio
import hashlib
import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.base import utcnow
from auth_service.domain.entities import RefreshToken, RevocationReason

logger = logging.getLogger(__name__)


def hash_token(value: str) -> str:
    return hashlib.sha256(value.encode()).hexdigest()


@dataclass(frozen=True)
class IssuedRefreshToken:
    """Plain token value (handed to the client once) and its stored row"""

    value: str
    token: RefreshToken


class RefreshTokenStore:
    """
    Refresh token lifecycle on top of the unit of work.

    Business Rules:
    - Token value is secrets.token_urlsafe(32), only its SHA-256 digest is persisted
    - A token is valid iff it exists, is not revoked and expires_at > now
    - Rotation revokes the presented token with a compare-and-swap UPDATE, so of
      two concurrent rotations of one token exactly one succeeds
    - Store errors and timeouts during validation fail closed (None, logged)

    The store never commits; the calling use case owns the transaction.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ttl: timedelta = timedelta(days=7),
        timeout_seconds: float = 5.0,
    ):
        self.uow = uow
        self.ttl = ttl
        self.timeout_seconds = timeout_seconds

    async def issue(self, user_id: UUID, ttl: Optional[timedelta] = None) -> IssuedRefreshToken:
        value = secrets.token_urlsafe(32)
        token = RefreshToken(
            user_id=user_id,
            token_hash=hash_token(value),
            revoked=False,
            expires_at=utcnow() + (ttl or self.ttl),
        )
        token = await self.uow.refresh_tokens.create(token)
        return IssuedRefreshToken(value=value, token=token)

    async def validate_and_rotate(
        self, value: str
    ) -> Optional[Tuple[UUID, IssuedRefreshToken]]:
        """
        Consume a refresh token and issue its replacement.

        Args:
            value: Plain refresh token presented by the client

        Returns:
            (user_id, replacement) on success, None if the token is unknown,
            revoked, expired, lost a concurrent rotation, or the store failed
        """
        try:
            async with asyncio.timeout(self.timeout_seconds):
                stored = await self.uow.refresh_tokens.get_by_token_hash(hash_token(value))
                if stored is None:
                    logger.info("Refresh rejected: unknown token")
                    return None
                if stored.revoked:
                    logger.warning(
                        "Refresh rejected: token %s already revoked (%s)",
                        stored.id,
                        stored.revoked_reason.value if stored.revoked_reason else "unknown",
                    )
                    return None
                if stored.is_expired():
                    logger.info("Refresh rejected: token %s expired", stored.id)
                    return None

                swapped = await self.uow.refresh_tokens.revoke_if_active(
                    stored.id, RevocationReason.rotated
                )
                if not swapped:
                    logger.warning(
                        "Refresh rejected: token %s was rotated concurrently", stored.id
                    )
                    return None

                replacement = await self.issue(stored.user_id)
                return stored.user_id, replacement
        except (SQLAlchemyError, TimeoutError):
            logger.error("Refresh token store unavailable", exc_info=True)
            return None

    async def revoke_all_for_account(
        self, user_id: UUID, reason: RevocationReason = RevocationReason.logout
    ) -> int:
        count = await self.uow.refresh_tokens.revoke_all_by_user_id(user_id, reason)
        logger.info("Revoked %d refresh tokens for user %s (%s)", count, user_id, reason.value)
        return count
