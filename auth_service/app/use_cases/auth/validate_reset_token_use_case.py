from auth_service.app.services.single_use_codes import PasswordResetTokenService
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.libs.result import Result, Return
from .dtos import ValidateResetTokenResponse


class ValidateResetTokenUseCase:
    """Check a reset token before showing the new-password form. Does not consume it."""

    def __init__(self, uow: UnitOfWork, reset_tokens: PasswordResetTokenService):
        self.uow = uow
        self.reset_tokens = reset_tokens

    async def execute(self, token: str) -> Result[ValidateResetTokenResponse]:
        async with self.uow:
            reset_token = await self.reset_tokens.resolve(token)

        return Return.ok(ValidateResetTokenResponse(valid=reset_token is not None))
