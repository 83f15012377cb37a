"""
Use Case: Purge Expired Refresh Tokens

Deletes refresh token rows whose expiry has passed. Expired tokens are
already rejected at validation; this only reclaims storage.
"""

import logging

from pydantic import BaseModel

from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.libs.result import Result, Return

logger = logging.getLogger(__name__)


class PurgeExpiredTokensResponse(BaseModel):
    """Response DTO for PurgeExpiredTokensUseCase"""

    status: str
    refresh_tokens_purged: int


class PurgeExpiredTokensUseCase:
    """
    Purge expired refresh tokens.

    Future Enhancement:
    - Run on a schedule instead of through the admin API
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[PurgeExpiredTokensResponse]:
        async with self.uow:
            purged = await self.uow.refresh_tokens.delete_expired()
            await self.uow.commit()

        logger.info("Purged %d expired refresh tokens", purged)
        return Return.ok(
            PurgeExpiredTokensResponse(status="purged", refresh_tokens_purged=purged)
        )
