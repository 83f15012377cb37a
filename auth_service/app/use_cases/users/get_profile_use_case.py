"""
Get Profile Use Case

Loads the current user from the access token claims.
"""

from uuid import UUID

from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.app.use_cases.auth.register_dto import UserInfo
from auth_service.domain.entities import UserStatus
from auth_service.libs.result import Error, Result, Return


class GetProfileUseCase:
    """
    Use case for loading the current user.

    Business Rules:
    - JWT payload provides user_id
    - User must exist and not be deleted
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[UserInfo]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None or user.status == UserStatus.deleted:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            return Return.ok(UserInfo.from_user(user))
