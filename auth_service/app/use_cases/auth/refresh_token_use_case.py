"""
Refresh Token Use Case

Exchanges a refresh token for a new access/refresh pair (rotation).
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from auth_service.app.services.refresh_token_store import RefreshTokenStore
from auth_service.app.services.token_issuer import ITokenIssuer
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.entities import AuditEvent
from auth_service.libs.result import Error, Result, Return
from .dtos import RefreshTokenResponse

logger = logging.getLogger(__name__)

INVALID_TOKEN = Error("INVALID_TOKEN", "Invalid or expired refresh token")


class RefreshTokenUseCase:
    """
    Use case for refreshing JWT access tokens.

    Business Rules:
    - Refresh token rotation: old token revoked, new token issued
    - Token must exist, be unrevoked and unexpired
    - A token can be rotated once; a concurrent or repeated use fails
    - User must still be able to log in (active, verified, not locked),
      otherwise the rotation is rolled back
    - Store errors fail closed (INVALID_TOKEN)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_issuer: ITokenIssuer,
        refresh_tokens: RefreshTokenStore,
    ):
        self.uow = uow
        self.token_issuer = token_issuer
        self.refresh_tokens = refresh_tokens

    async def execute(self, refresh_token: str) -> Result[RefreshTokenResponse]:
        """
        Execute refresh token use case.

        Args:
            refresh_token: The refresh token to verify and rotate

        Returns:
            Result with RefreshTokenResponse containing new tokens, or Error
        """
        try:
            async with self.uow:
                rotated = await self.refresh_tokens.validate_and_rotate(refresh_token)
                if rotated is None:
                    return Return.err(INVALID_TOKEN)

                user_id, issued = rotated
                user = await self.uow.users.get_by_id(user_id)
                if user is None or not user.can_login():
                    logger.warning("Refresh rejected: user %s cannot log in", user_id)
                    return Return.err(INVALID_TOKEN)

                # Create audit event
                audit = AuditEvent(
                    user_id=user.id,
                    action="token_refresh",
                    event_metadata={"refresh_token_id": str(issued.token.id)},
                )
                await self.uow.audit_events.create(audit)

                # Commit transaction
                await self.uow.commit()
        except SQLAlchemyError:
            logger.error("Refresh failed: token store unavailable", exc_info=True)
            return Return.err(INVALID_TOKEN)

        access_token = self.token_issuer.issue_access_token(
            user.id, user.email, user.role.value
        )

        return Return.ok(
            RefreshTokenResponse(
                access_token=access_token,
                refresh_token=issued.value,
                expires_in=self.token_issuer.access_token_ttl_seconds,
            )
        )
