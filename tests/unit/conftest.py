from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from auth_service.adapter.services.jwt_token_issuer import JwtTokenIssuer
from auth_service.adapter.services.memory_counter_store import InMemoryCounterStore
from auth_service.adapter.services.rsa_key_provider import RsaKeyProvider, load_key_material
from auth_service.app.services.lockout_policy import LockoutPolicy
from auth_service.app.services.rate_limiter import RateLimiter
from auth_service.app.services.password_hasher import hash_password


def _returns_argument():
    return AsyncMock(side_effect=lambda entity, *args: entity)


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.create = _returns_argument()
    uow.users.update = _returns_argument()

    uow.refresh_tokens = MagicMock()
    uow.refresh_tokens.create = _returns_argument()
    uow.refresh_tokens.get_by_token_hash = AsyncMock(return_value=None)
    uow.refresh_tokens.revoke_if_active = AsyncMock(return_value=True)
    uow.refresh_tokens.revoke_all_by_user_id = AsyncMock(return_value=0)
    uow.refresh_tokens.delete_expired = AsyncMock(return_value=0)

    uow.verification_codes = MagicMock()
    uow.verification_codes.create = _returns_argument()
    uow.verification_codes.get_latest_by_user_id = AsyncMock(return_value=None)
    uow.verification_codes.update = _returns_argument()

    uow.password_reset_tokens = MagicMock()
    uow.password_reset_tokens.create = _returns_argument()
    uow.password_reset_tokens.get_by_token_hash = AsyncMock(return_value=None)
    uow.password_reset_tokens.get_latest_by_user_id = AsyncMock(return_value=None)
    uow.password_reset_tokens.update = _returns_argument()

    uow.audit_events = MagicMock()
    uow.audit_events.create = _returns_argument()
    return uow


@pytest.fixture
def key_provider(rsa_keys):
    return RsaKeyProvider(
        load_key_material(rsa_keys["private_pkcs8"], rsa_keys["public_spki"], "test-key")
    )


@pytest.fixture
def token_issuer(key_provider):
    return JwtTokenIssuer(key_provider, access_token_ttl_seconds=3600)


@pytest.fixture
def rate_limiter():
    return RateLimiter(InMemoryCounterStore())


@pytest.fixture
def lockout_policy():
    return LockoutPolicy(max_attempts=5, lockout_duration=timedelta(minutes=15))


@pytest.fixture(scope="session")
def password():
    return "SecurePass123!"


@pytest.fixture(scope="session")
def password_hash(password):
    return hash_password(password)
