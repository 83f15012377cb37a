import pytest

from config import ApplicationConfig
from auth_service.adapter.services.memory_counter_store import InMemoryCounterStore
from auth_service.adapter.services.redis_counter_store import RedisCounterStore
from auth_service.adapter.services.rsa_key_provider import KeyConfigurationError
from auth_service.api.app import build_counter_store, build_rate_limits, create_app
from auth_service.app.services.rate_limiter import DEFAULT_RATE_LIMITS, RateLimitRule


def _config(**overrides):
    values = {
        "CACHE_BACKEND": "memory",
        "JWT_PRIVATE_KEY": None,
        "JWT_PUBLIC_KEY": None,
        "JWT_ADDITIONAL_PUBLIC_KEYS": {},
        "JWT_ALLOW_GENERATED_KEYS": False,
        "RATE_LIMITS": {},
    }
    values.update(overrides)
    return type("TestConfig", (ApplicationConfig,), values)


def test_startup_fails_without_keys():
    with pytest.raises(KeyConfigurationError):
        create_app(_config())


def test_startup_fails_with_only_private_key(rsa_keys):
    with pytest.raises(KeyConfigurationError):
        create_app(_config(JWT_PRIVATE_KEY=rsa_keys["private_pkcs8"]))


def test_startup_fails_with_mismatched_pair(rsa_keys, other_rsa_keys):
    with pytest.raises(KeyConfigurationError):
        create_app(
            _config(
                JWT_PRIVATE_KEY=rsa_keys["private_pkcs8"],
                JWT_PUBLIC_KEY=other_rsa_keys["public_spki"],
            )
        )


def test_startup_with_generated_keys():
    app = create_app(_config(JWT_ALLOW_GENERATED_KEYS=True))

    assert len(app.state.token_issuer.jwks()["keys"]) == 1


def test_startup_with_escaped_keys(rsa_keys):
    app = create_app(
        _config(
            JWT_PRIVATE_KEY=rsa_keys["private_pkcs1"].replace("\n", "\\n"),
            JWT_PUBLIC_KEY=rsa_keys["public_pkcs1"].replace("\n", "\\n"),
            JWT_KEY_ID="escaped",
        )
    )

    assert app.state.token_issuer.jwks()["keys"][0]["kid"] == "escaped"


def test_rate_limit_overrides():
    rules = build_rate_limits(
        _config(RATE_LIMITS={"login": {"limit": 10, "window_seconds": 60}})
    )

    assert rules["login"] == RateLimitRule(limit=10, window_seconds=60)
    assert rules["register"] == DEFAULT_RATE_LIMITS["register"]
    assert DEFAULT_RATE_LIMITS["login"] == RateLimitRule(limit=5, window_seconds=300)


def test_counter_store_backend_selection():
    assert isinstance(build_counter_store(_config()), InMemoryCounterStore)
    assert isinstance(
        build_counter_store(_config(CACHE_BACKEND="redis", REDIS_URL="redis://localhost:6379/0")),
        RedisCounterStore,
    )
