"""
Register Use Case DTOs (Data Transfer Objects)

Command/Response pattern for clean architecture separation:
- RegisterCommand: Input to use case (validated business intent)
- RegisterResponse: Output from use case (structured result)
"""

from typing import Optional

from pydantic import BaseModel

from auth_service.domain.entities import User


class RegisterCommand(BaseModel):
    """
    Register command - represents validated registration intent

    Created by API layer after request validation passes.
    Contains only business-relevant data (no HTTP concerns).
    """

    email: str
    password: str
    first_name: str
    last_name: str


class UserInfo(BaseModel):
    """User information in authentication responses"""

    id: str
    email: str
    first_name: str
    last_name: str
    role: str
    status: str
    is_verified: bool
    last_login_at: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserInfo":
        return cls(
            id=str(user.id),
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role.value,
            status=user.status.value,
            is_verified=user.is_verified,
            last_login_at=user.last_login_at.isoformat() if user.last_login_at else None,
        )


class RegisterResponse(BaseModel):
    """
    Register response - structured output from use case

    No tokens are issued: the account stays pending until the emailed
    verification code is confirmed.
    """

    user: UserInfo
    message: str
