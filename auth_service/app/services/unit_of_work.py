from abc import ABC, abstractmethod

from auth_service.app.repositories.audit_event_repository import IAuditEventRepository
from auth_service.app.repositories.email_verification_code_repository import (
    IEmailVerificationCodeRepository,
)
from auth_service.app.repositories.password_reset_token_repository import IPasswordResetTokenRepository
from auth_service.app.repositories.refresh_token_repository import IRefreshTokenRepository
from auth_service.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    refresh_tokens: IRefreshTokenRepository
    verification_codes: IEmailVerificationCodeRepository
    password_reset_tokens: IPasswordResetTokenRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
