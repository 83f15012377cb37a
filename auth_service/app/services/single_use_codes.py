"""
Single-Use Codes

Email verification codes (6 digits, attempt-limited) and password reset
tokens (high-entropy, single-use). For both kinds only the latest value
issued to a user is honoured; older ones become unreachable.
"""

import asyncio
import hashlib
import hmac
import logging
import secrets
from datetime import timedelta
from enum import Enum
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.app.utils.masking import mask_secret
from auth_service.domain.base import utcnow
from auth_service.domain.entities import (
    EmailVerificationCode,
    MAX_VERIFICATION_ATTEMPTS,
    PasswordResetToken,
    UserStatus,
)

logger = logging.getLogger(__name__)

CODE_LENGTH = 6


class VerificationOutcome(str, Enum):
    SUCCESS = "success"
    INVALID_OR_EXPIRED = "invalid_or_expired"
    ATTEMPTS_EXCEEDED = "attempts_exceeded"


def generate_numeric_code(length: int = CODE_LENGTH) -> str:
    return "".join(secrets.choice("0123456789") for _ in range(length))


def hash_reset_token(value: str) -> str:
    return hashlib.sha256(value.encode()).hexdigest()


class EmailVerificationCodeService:
    """
    Email verification codes.

    Business Rules:
    - 6 ASCII digits drawn from secrets, 15-minute window by default
    - Each failed comparison increments attempts; the third failure returns
      ATTEMPTS_EXCEEDED and so does every later check of that code
    - Success marks the code used and activates the owning account
    - Comparison is constant-time
    - Store errors and timeouts fail closed (INVALID_OR_EXPIRED)

    The service never commits; the calling use case owns the transaction.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ttl: timedelta = timedelta(minutes=15),
        timeout_seconds: float = 5.0,
    ):
        self.uow = uow
        self.ttl = ttl
        self.timeout_seconds = timeout_seconds

    async def generate(self, user_id: UUID, ttl: Optional[timedelta] = None) -> str:
        code = generate_numeric_code()
        await self.uow.verification_codes.create(
            EmailVerificationCode(
                user_id=user_id,
                code=code,
                expires_at=utcnow() + (ttl or self.ttl),
            )
        )
        logger.info("Issued verification code %s for user %s", mask_secret(code), user_id)
        return code

    async def verify(self, user_id: UUID, value: str) -> VerificationOutcome:
        try:
            async with asyncio.timeout(self.timeout_seconds):
                return await self._verify(user_id, value)
        except (SQLAlchemyError, TimeoutError):
            logger.error("Verification code store unavailable", exc_info=True)
            return VerificationOutcome.INVALID_OR_EXPIRED

    async def _verify(self, user_id: UUID, value: str) -> VerificationOutcome:
        code = await self.uow.verification_codes.get_latest_by_user_id(user_id)
        if code is None or code.used:
            return VerificationOutcome.INVALID_OR_EXPIRED
        if code.has_exceeded_attempts():
            return VerificationOutcome.ATTEMPTS_EXCEEDED
        if code.is_expired():
            return VerificationOutcome.INVALID_OR_EXPIRED

        if not hmac.compare_digest(code.code.encode(), value.strip().encode()):
            code.attempts += 1
            await self.uow.verification_codes.update(code)
            logger.info(
                "Verification code mismatch for user %s (%d/%d)",
                user_id, code.attempts, MAX_VERIFICATION_ATTEMPTS,
            )
            if code.has_exceeded_attempts():
                return VerificationOutcome.ATTEMPTS_EXCEEDED
            return VerificationOutcome.INVALID_OR_EXPIRED

        code.used = True
        await self.uow.verification_codes.update(code)

        user = await self.uow.users.get_by_id(user_id)
        if user is not None:
            user.is_verified = True
            if user.status == UserStatus.pending_verification:
                user.status = UserStatus.active
            user.updated_at = utcnow()
            await self.uow.users.update(user)

        return VerificationOutcome.SUCCESS


class PasswordResetTokenService:
    """
    Password reset tokens.

    Business Rules:
    - Token is secrets.token_urlsafe(32), only its SHA-256 digest is persisted
    - Expires after 4 hours by default, no attempt cap
    - Single-use: consumed on successful reset
    - Only the latest token for a user is accepted
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ttl: timedelta = timedelta(hours=4),
        timeout_seconds: float = 5.0,
    ):
        self.uow = uow
        self.ttl = ttl
        self.timeout_seconds = timeout_seconds

    async def generate(self, user_id: UUID, ttl: Optional[timedelta] = None) -> str:
        value = secrets.token_urlsafe(32)
        await self.uow.password_reset_tokens.create(
            PasswordResetToken(
                user_id=user_id,
                token_hash=hash_reset_token(value),
                used=False,
                expires_at=utcnow() + (ttl or self.ttl),
            )
        )
        return value

    async def verify(self, user_id: UUID, value: str) -> VerificationOutcome:
        token = await self.resolve(value)
        if token is None or token.user_id != user_id:
            return VerificationOutcome.INVALID_OR_EXPIRED
        return VerificationOutcome.SUCCESS

    async def resolve(self, value: str) -> Optional[PasswordResetToken]:
        """
        Find the reset token for a plain value.

        Returns:
            The token if it is the latest for its user, unused and unexpired,
            otherwise None (also on store failure)
        """
        try:
            async with asyncio.timeout(self.timeout_seconds):
                token = await self.uow.password_reset_tokens.get_by_token_hash(
                    hash_reset_token(value)
                )
                if token is None or not token.is_valid():
                    return None
                latest = await self.uow.password_reset_tokens.get_latest_by_user_id(
                    token.user_id
                )
                if latest is None or latest.id != token.id:
                    logger.info("Reset token for user %s superseded", token.user_id)
                    return None
                return token
        except (SQLAlchemyError, TimeoutError):
            logger.error("Password reset token store unavailable", exc_info=True)
            return None

    async def consume(self, token: PasswordResetToken) -> None:
        token.used = True
        await self.uow.password_reset_tokens.update(token)
