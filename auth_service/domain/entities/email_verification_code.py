"""
EmailVerificationCode Entity

Six-digit code confirming ownership of a registered email address.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow

MAX_VERIFICATION_ATTEMPTS = 3


class EmailVerificationCode(SQLModel, table=True):
    """
    EmailVerificationCode entity.

    Business Rules:
    - 6 ASCII digits, expires after 15 minutes
    - Only the latest code issued for a user is ever checked
    - At most 3 failed checks, after which the code is dead even if time remains
    - Single-use: marked used after successful verification
    """

    __tablename__ = "email_verification_codes"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", index=True)
    code: str = Field(max_length=6)

    used: bool = Field(default=False)
    attempts: int = Field(default=0)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_email_verification_user_created", "user_id", "created_at"),
    )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or utcnow()) >= self.expires_at

    def has_exceeded_attempts(self) -> bool:
        return self.attempts >= MAX_VERIFICATION_ATTEMPTS

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        return not self.used and not self.is_expired(now) and not self.has_exceeded_attempts()
