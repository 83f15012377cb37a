import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from auth_service.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from auth_service.depends import get_unit_of_work
from tests.fixtures.email_outbox import RecordingEmailSender
from tests.fixtures.json_loader import TestDataLoader
from tests.utils.auth_flow import bearer, login, register_and_verify

ADMIN_API_KEY = "integration-admin-key"


@pytest.fixture
def test_data():
    return TestDataLoader()


@pytest.fixture
def app_config(rsa_keys, tmp_path):
    generous = {"limit": 1000, "window_seconds": 60}
    return type(
        "TestConfig",
        (ApplicationConfig,),
        {
            "DB_URI": f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
            "CACHE_BACKEND": "memory",
            "LOG_LEVEL": "DEBUG",
            "ADMIN_API_KEY": ADMIN_API_KEY,
            "JWT_PRIVATE_KEY": rsa_keys["private_pkcs8"],
            "JWT_PUBLIC_KEY": rsa_keys["public_spki"],
            "JWT_KEY_ID": "integration-key",
            "JWT_ADDITIONAL_PUBLIC_KEYS": {},
            "JWT_ALLOW_GENERATED_KEYS": False,
            "RATE_LIMITS": {
                prefix: generous
                for prefix in (
                    "login",
                    "register",
                    "verify-email",
                    "resend-verification",
                    "forgot-password",
                    "reset-password",
                )
            },
        },
    )


@pytest_asyncio.fixture
async def engine(app_config):
    engine = create_async_engine(app_config.DB_URI, connect_args={"timeout": 10})
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def outbox():
    return RecordingEmailSender()


@pytest.fixture
def app(app_config, session_factory, outbox):
    from auth_service.api.app import create_app

    app = create_app(app_config)
    app.state.email_sender = outbox

    async def override_get_unit_of_work():
        async with session_factory() as session:
            yield SqlAlchemyUnitOfWork(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def admin_headers():
    return {"X-Admin-API-Key": ADMIN_API_KEY}


@pytest_asyncio.fixture
async def verified_user(client, outbox, test_data):
    user = test_data.get_copy("user")
    await register_and_verify(client, outbox, user)
    return user


@pytest_asyncio.fixture
async def session_tokens(client, verified_user):
    return await login(client, verified_user)


@pytest.fixture
def auth_headers(session_tokens):
    return bearer(session_tokens["access_token"])
