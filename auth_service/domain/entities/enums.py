"""
Auth Service Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserStatus(str, Enum):
    """User account status"""

    pending_verification = "pending_verification"
    active = "active"
    suspended = "suspended"
    deleted = "deleted"


class UserRole(str, Enum):
    """Role carried in access tokens"""

    user = "user"
    admin = "admin"


class AuthProvider(str, Enum):
    """Where the account's identity is asserted"""

    local = "local"
    google = "google"


class RevocationReason(str, Enum):
    """Why a refresh token left the active state"""

    rotated = "rotated"
    logout = "logout"
    login = "login"
    password_reset = "password_reset"
    password_change = "password_change"
