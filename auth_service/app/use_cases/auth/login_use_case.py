"""
Login Use Case

Authenticates local credentials and returns an access/refresh token pair.
"""

import asyncio
import logging

from sqlalchemy.exc import SQLAlchemyError

from auth_service.app.services.lockout_policy import LockoutPolicy
from auth_service.app.services.password_hasher import dummy_verify, verify_password
from auth_service.app.services.rate_limiter import DEFAULT_RATE_LIMITS, RateLimiter, RateLimitRule
from auth_service.app.services.refresh_token_store import RefreshTokenStore
from auth_service.app.services.token_issuer import ITokenIssuer
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.base import utcnow
from auth_service.domain.entities import AuditEvent, RevocationReason, UserStatus
from auth_service.libs.result import Error, Result, Return
from .dtos import LoginResponse
from .register_dto import UserInfo

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid email or password")


class LoginUseCase:
    """
    Use case for user login and JWT issuance.

    Business Rules:
    - Rate limited per client identifier before any credential work
    - Constant-time password comparison, unknown emails still pay a bcrypt check
    - Locked accounts are rejected with the same error as a wrong password
    - Each wrong password is counted; the 5th locks the account for 15 minutes
    - User must be verified and active
    - Success resets the lockout counter, revokes all previous refresh tokens
      and issues a new one
    - Store errors and timeouts fail closed (INVALID_CREDENTIALS)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_issuer: ITokenIssuer,
        refresh_tokens: RefreshTokenStore,
        lockout_policy: LockoutPolicy,
        rate_limiter: RateLimiter,
        rate_limit: RateLimitRule = DEFAULT_RATE_LIMITS["login"],
        store_timeout_seconds: float = 5.0,
    ):
        self.uow = uow
        self.token_issuer = token_issuer
        self.refresh_tokens = refresh_tokens
        self.lockout_policy = lockout_policy
        self.rate_limiter = rate_limiter
        self.rate_limit = rate_limit
        self.store_timeout_seconds = store_timeout_seconds

    async def execute(
        self, email: str, password: str, client_identifier: str
    ) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            email: User email
            password: Plain text password
            client_identifier: Caller identity used for rate limiting (client IP)

        Returns:
            Result with LoginResponse containing tokens and user info, or Error
        """
        if not await self.rate_limiter.check("login", client_identifier, self.rate_limit):
            return Return.err(
                Error("RATE_LIMIT_EXCEEDED", "Too many login attempts. Please try again later.")
            )

        try:
            async with self.uow:
                async with asyncio.timeout(self.store_timeout_seconds):
                    return await self._authenticate(email, password)
        except (SQLAlchemyError, TimeoutError):
            logger.error("Login failed: credential store unavailable", exc_info=True)
            return Return.err(INVALID_CREDENTIALS)

    async def _authenticate(self, email: str, password: str) -> Result[LoginResponse]:
        user = await self.uow.users.get_by_email(email)

        if user is None:
            # Hash dummy password to maintain constant time
            dummy_verify(password)
            return Return.err(INVALID_CREDENTIALS)

        # External-identity accounts have no local password
        if user.password_hash is None:
            dummy_verify(password)
            return Return.err(INVALID_CREDENTIALS)

        if self.lockout_policy.is_locked(user):
            logger.info("Login rejected for locked account %s", user.id)
            return Return.err(INVALID_CREDENTIALS)

        if not verify_password(password, user.password_hash):
            locked = self.lockout_policy.record_failure(user)
            user.updated_at = utcnow()
            await self.uow.users.update(user)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="login_failed",
                    event_metadata={"failed_attempts": user.failed_login_attempts},
                )
            )
            if locked:
                await self.uow.audit_events.create(
                    AuditEvent(
                        user_id=user.id,
                        action="account_locked",
                        event_metadata={"locked_until": user.locked_until.isoformat()},
                    )
                )
            await self.uow.commit()
            return Return.err(INVALID_CREDENTIALS)

        # Check user status
        if user.is_pending_verification() or not user.is_verified:
            return Return.err(
                Error("EMAIL_NOT_VERIFIED", "Please verify your email before logging in")
            )
        if user.status != UserStatus.active:
            return Return.err(Error("USER_DISABLED", "User account is disabled"))

        self.lockout_policy.record_success(user)
        user.updated_at = utcnow()
        await self.uow.users.update(user)

        # One active session per login: prior refresh tokens die here
        await self.refresh_tokens.revoke_all_for_account(user.id, RevocationReason.login)
        issued = await self.refresh_tokens.issue(user.id)

        await self.uow.audit_events.create(
            AuditEvent(
                user_id=user.id,
                action="login",
                event_metadata={"refresh_token_id": str(issued.token.id)},
            )
        )

        # Commit transaction
        await self.uow.commit()

        access_token = self.token_issuer.issue_access_token(
            user.id, user.email, user.role.value
        )

        return Return.ok(
            LoginResponse(
                access_token=access_token,
                refresh_token=issued.value,
                expires_in=self.token_issuer.access_token_ttl_seconds,
                user=UserInfo.from_user(user),
            )
        )
