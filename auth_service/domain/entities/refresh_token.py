"""
RefreshToken Entity

Opaque, persisted session-continuation credential.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import RevocationReason


class RefreshToken(SQLModel, table=True):
    """
    RefreshToken entity - stores the digest of an opaque refresh token.

    Business Rules:
    - Token value is 256 bits from secrets.token_urlsafe, only its SHA-256 is stored
    - Rotated on every use: the presented token is revoked, a new one issued
    - revoked is one-way; revoked_reason keeps terminal states distinct for audit
    - Expired rows are invalid even before the cleanup job deletes them
    """

    __tablename__ = "refresh_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    token_hash: str = Field(unique=True, index=True, max_length=64)  # SHA-256 hex

    revoked: bool = Field(default=False)
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    revoked_reason: Optional[RevocationReason] = Field(default=None)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_refresh_token_expires_at", "expires_at"),
        Index("idx_refresh_token_user_revoked", "user_id", "revoked"),
    )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expires_at <= (now or utcnow())
