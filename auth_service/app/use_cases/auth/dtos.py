"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
"""

from typing import Optional

from pydantic import BaseModel

from auth_service.domain.entities import AuthProvider
from .register_dto import UserInfo


# ============================================================================
# Command DTOs
# ============================================================================


class ExternalLoginCommand(BaseModel):
    """Identity asserted by an external provider (OAuth2 callback)"""

    email: str
    first_name: str = ""
    last_name: str = ""
    provider: AuthProvider = AuthProvider.google


# ============================================================================
# Response DTOs
# ============================================================================


class VerifyEmailResponse(BaseModel):
    """Response for email verification use case"""

    status: str
    message: str


class ResendVerificationResponse(BaseModel):
    """Response for resend verification email use case"""

    status: str
    message: str


class LoginResponse(BaseModel):
    """Response for user login use case"""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserInfo


class RefreshTokenResponse(BaseModel):
    """Response for refresh token use case"""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class LogoutResponse(BaseModel):
    """Response for logout use case"""

    status: str
    revoked_sessions: int


class RequestPasswordResetResponse(BaseModel):
    """Response for request password reset use case"""

    status: str
    message: str


class ValidateResetTokenResponse(BaseModel):
    """Response for validate reset token use case"""

    valid: bool


class ConfirmPasswordResetResponse(BaseModel):
    """Response for confirm password reset use case"""

    status: str
    message: str


class ChangePasswordResponse(BaseModel):
    """Response for change password use case"""

    status: str
    message: str
    revoked_sessions: Optional[int] = None
