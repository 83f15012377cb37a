"""
Auth Service Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    AuthProvider,
    RevocationReason,
    UserRole,
    UserStatus,
)

# Export all entities
from .user import User
from .refresh_token import RefreshToken
from .email_verification_code import EmailVerificationCode, MAX_VERIFICATION_ATTEMPTS
from .password_reset_token import PasswordResetToken
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "AuthProvider",
    "RevocationReason",
    "UserRole",
    "UserStatus",
    # Entities
    "User",
    "RefreshToken",
    "EmailVerificationCode",
    "MAX_VERIFICATION_ATTEMPTS",
    "PasswordResetToken",
    "AuditEvent",
]
