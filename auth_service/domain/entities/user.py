"""
User Entity

Represents an account that can authenticate against the service.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import AuthProvider, UserRole, UserStatus


class User(SQLModel, table=True):
    """
    User entity - an account plus its embedded lockout state.

    Business Rules:
    - Email must be unique across all users (stored lower-cased)
    - Password stored as bcrypt hash (cost factor 12), None for external identities
    - Local accounts start as pending_verification until the email code is confirmed
    - locked_until in the future blocks authentication regardless of password
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: Optional[str] = Field(default=None, max_length=60)

    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)

    role: UserRole = Field(default=UserRole.user)
    status: UserStatus = Field(default=UserStatus.pending_verification)
    auth_provider: AuthProvider = Field(default=AuthProvider.local)
    is_verified: bool = Field(default=False)

    # Lockout state
    failed_login_attempts: int = Field(default=0)
    locked_until: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    last_failed_login_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_user_status", "status"),)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def is_pending_verification(self) -> bool:
        return self.status == UserStatus.pending_verification

    def is_locked(self, now: Optional[datetime] = None) -> bool:
        if self.locked_until is None:
            return False
        return (now or utcnow()) < self.locked_until

    def can_login(self, now: Optional[datetime] = None) -> bool:
        return (
            self.status == UserStatus.active
            and self.is_verified
            and not self.is_locked(now)
        )
