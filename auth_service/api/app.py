import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from auth_service.adapter.services.email_sender import LoggingEmailSender
from auth_service.adapter.services.jwt_token_issuer import JwtTokenIssuer
from auth_service.adapter.services.memory_counter_store import InMemoryCounterStore
from auth_service.adapter.services.redis_counter_store import RedisCounterStore
from auth_service.adapter.services.rsa_key_provider import RsaKeyProvider
from auth_service.app.services.counter_store import ICounterStore
from auth_service.app.services.lockout_policy import LockoutPolicy
from auth_service.app.services.rate_limiter import DEFAULT_RATE_LIMITS, RateLimiter, RateLimitRule
from .error import ClientError, ServerError
from .log_config import configure_logging

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning("Client error on %s: %s", request.url.path, error_dict)
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error("Server error on %s: %s", request.url.path, exc.base_error.code)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


def build_counter_store(ApplicationConfig) -> ICounterStore:
    if ApplicationConfig.CACHE_BACKEND == "memory":
        return InMemoryCounterStore()
    return RedisCounterStore(
        ApplicationConfig.REDIS_URL,
        socket_timeout=ApplicationConfig.RATE_LIMIT_TIMEOUT_SECONDS,
    )


def build_rate_limits(ApplicationConfig) -> dict:
    rules = dict(DEFAULT_RATE_LIMITS)
    for prefix, rule in (ApplicationConfig.RATE_LIMITS or {}).items():
        rules[prefix] = RateLimitRule(
            limit=int(rule["limit"]), window_seconds=int(rule["window_seconds"])
        )
    return rules


def create_app(ApplicationConfig) -> FastAPI:
    """
    Build the FastAPI application.

    Loads and self-tests the signing keys first, so a bad key configuration
    raises KeyConfigurationError here and the process never starts serving.
    """
    configure_logging(ApplicationConfig.LOG_LEVEL)

    key_provider = RsaKeyProvider.from_config(
        ApplicationConfig.JWT_PRIVATE_KEY,
        ApplicationConfig.JWT_PUBLIC_KEY,
        key_id=ApplicationConfig.JWT_KEY_ID,
        additional_public_keys=ApplicationConfig.JWT_ADDITIONAL_PUBLIC_KEYS,
        allow_generated=ApplicationConfig.JWT_ALLOW_GENERATED_KEYS,
    )
    token_issuer = JwtTokenIssuer(key_provider, ApplicationConfig.ACCESS_TOKEN_TTL_SECONDS)
    token_issuer.self_test()

    counter_store = build_counter_store(ApplicationConfig)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await counter_store.close()

    app = FastAPI(title="Auth Service", version="0.1.0", lifespan=lifespan)

    app.state.config = ApplicationConfig
    app.state.token_issuer = token_issuer
    app.state.rate_limiter = RateLimiter(
        counter_store, timeout_seconds=ApplicationConfig.RATE_LIMIT_TIMEOUT_SECONDS
    )
    app.state.rate_limits = build_rate_limits(ApplicationConfig)
    app.state.lockout_policy = LockoutPolicy(
        max_attempts=ApplicationConfig.LOCKOUT_MAX_ATTEMPTS,
        lockout_duration=timedelta(minutes=ApplicationConfig.LOCKOUT_DURATION_MINUTES),
    )
    app.state.email_sender = LoggingEmailSender()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from auth_service.api.routes import admin, auth, health_check, jwks, user

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(jwks.router, tags=["Keys"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(user.router, tags=["User"])
    app.include_router(admin.router, tags=["Admin"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    logger.info("Auth service ready, signing with key %s", key_provider.key_id)
    return app
