from datetime import timedelta

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from auth_service.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from auth_service.api.error import ClientError
from auth_service.app.services.email_sender import IEmailSender
from auth_service.app.services.lockout_policy import LockoutPolicy
from auth_service.app.services.rate_limiter import RateLimiter
from auth_service.app.services.refresh_token_store import RefreshTokenStore
from auth_service.app.services.single_use_codes import (
    EmailVerificationCodeService,
    PasswordResetTokenService,
)
from auth_service.app.services.token_issuer import ITokenIssuer
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.libs.result import Error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_config(request: Request):
    return request.app.state.config


def get_token_issuer(request: Request) -> ITokenIssuer:
    return request.app.state.token_issuer


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def get_lockout_policy(request: Request) -> LockoutPolicy:
    return request.app.state.lockout_policy


def get_email_sender(request: Request) -> IEmailSender:
    return request.app.state.email_sender


def get_refresh_token_store(
    uow: UnitOfWork = Depends(get_unit_of_work), config=Depends(get_config)
) -> RefreshTokenStore:
    return RefreshTokenStore(
        uow,
        ttl=timedelta(days=config.REFRESH_TOKEN_TTL_DAYS),
        timeout_seconds=config.STORE_TIMEOUT_SECONDS,
    )


def get_verification_code_service(
    uow: UnitOfWork = Depends(get_unit_of_work), config=Depends(get_config)
) -> EmailVerificationCodeService:
    return EmailVerificationCodeService(
        uow,
        ttl=timedelta(minutes=config.VERIFICATION_CODE_TTL_MINUTES),
        timeout_seconds=config.STORE_TIMEOUT_SECONDS,
    )


def get_password_reset_token_service(
    uow: UnitOfWork = Depends(get_unit_of_work), config=Depends(get_config)
) -> PasswordResetTokenService:
    return PasswordResetTokenService(
        uow,
        ttl=timedelta(hours=config.PASSWORD_RESET_TTL_HOURS),
        timeout_seconds=config.STORE_TIMEOUT_SECONDS,
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    token_issuer: ITokenIssuer = Depends(get_token_issuer),
) -> dict:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Decoded JWT payload containing sub, user_id, role

    Raises:
        ClientError: 401 if token is missing, invalid or expired
    """
    payload = token_issuer.validate(credentials.credentials) if credentials else None

    if payload is None:
        raise ClientError(
            Error("INVALID_TOKEN", "Invalid or expired token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return payload
