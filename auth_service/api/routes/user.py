from uuid import UUID

from fastapi import APIRouter, Depends, status

from auth_service.api.error import raise_for_error
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.app.use_cases.auth import UserInfo
from auth_service.app.use_cases.users import GetProfileUseCase
from auth_service.depends import get_current_user, get_unit_of_work

router = APIRouter(prefix="/users", tags=["User"])


@router.get("/me", status_code=status.HTTP_200_OK, response_model=UserInfo)
async def get_me(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Current User

    Returns the account behind the access token.

    Raises:
        - 401 Unauthorized: Invalid or expired JWT
        - 404 Not Found: User no longer exists
    """
    use_case = GetProfileUseCase(uow)
    result = await use_case.execute(UUID(current_user["user_id"]))

    if result.is_err():
        raise_for_error(result.error)

    return result.value
