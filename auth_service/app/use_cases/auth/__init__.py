"""
Authentication Use Cases

All authentication-related business logic.
"""

from .register_use_case import RegisterUseCase
from .register_dto import RegisterCommand, RegisterResponse, UserInfo
from .login_use_case import LoginUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .logout_use_case import LogoutUseCase
from .verify_email_use_case import VerifyEmailUseCase
from .resend_verification_use_case import ResendVerificationUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .validate_reset_token_use_case import ValidateResetTokenUseCase
from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase
from .change_password_use_case import ChangePasswordUseCase
from .external_login_use_case import ExternalLoginUseCase
from .dtos import (
    ExternalLoginCommand,
    VerifyEmailResponse,
    ResendVerificationResponse,
    LoginResponse,
    RefreshTokenResponse,
    LogoutResponse,
    RequestPasswordResetResponse,
    ValidateResetTokenResponse,
    ConfirmPasswordResetResponse,
    ChangePasswordResponse,
)

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "VerifyEmailUseCase",
    "ResendVerificationUseCase",
    "RequestPasswordResetUseCase",
    "ValidateResetTokenUseCase",
    "ConfirmPasswordResetUseCase",
    "ChangePasswordUseCase",
    "ExternalLoginUseCase",
    # DTOs - Commands
    "RegisterCommand",
    "ExternalLoginCommand",
    # DTOs - Responses
    "RegisterResponse",
    "VerifyEmailResponse",
    "ResendVerificationResponse",
    "LoginResponse",
    "RefreshTokenResponse",
    "LogoutResponse",
    "RequestPasswordResetResponse",
    "ValidateResetTokenResponse",
    "ConfirmPasswordResetResponse",
    "ChangePasswordResponse",
    # DTOs - Nested Models
    "UserInfo",
]
