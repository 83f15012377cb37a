import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.environ.get("AUTH_CONFIG_FILE", os.path.join(ROOT_PATH, "env.yaml"))

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


def setting(key, default=None):
    """Environment variable, then env.yaml, then default.

    Environment values are parsed as YAML unless the default is a string,
    so PEM keys and URLs are taken verbatim.
    """
    raw = os.environ.get(key)
    if raw is None:
        return data.get(key, default)
    if default is None or isinstance(default, str):
        return raw
    return yaml.safe_load(raw)


class ApplicationConfig:
    DB_URI = setting("DB_URI", "sqlite+aiosqlite:///./auth.db")
    REDIS_URL = setting("REDIS_URL", "redis://localhost:6379/0")
    CACHE_BACKEND = setting("CACHE_BACKEND", "redis")  # redis | memory
    API_PORT = setting("API_PORT", 8000)
    API_HOST = setting("API_HOST", "0.0.0.0")
    API_RELOAD = bool(setting("API_RELOAD", False))
    CORS_ORIGINS = setting("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = bool(setting("CORS_ALLOW_CREDENTIALS", True))
    LOG_LEVEL = setting("LOG_LEVEL", "INFO")
    ADMIN_API_KEY = setting("ADMIN_API_KEY", "test-admin-key-12345")

    # Signing keys
    JWT_PRIVATE_KEY = setting("JWT_PRIVATE_KEY")
    JWT_PUBLIC_KEY = setting("JWT_PUBLIC_KEY")
    JWT_KEY_ID = setting("JWT_KEY_ID", "auth-key-1")
    JWT_ADDITIONAL_PUBLIC_KEYS = setting("JWT_ADDITIONAL_PUBLIC_KEYS", {})
    JWT_ALLOW_GENERATED_KEYS = bool(setting("JWT_ALLOW_GENERATED_KEYS", False))

    # Token and code lifetimes
    ACCESS_TOKEN_TTL_SECONDS = int(setting("ACCESS_TOKEN_TTL_SECONDS", 86400))
    REFRESH_TOKEN_TTL_DAYS = int(setting("REFRESH_TOKEN_TTL_DAYS", 7))
    VERIFICATION_CODE_TTL_MINUTES = int(setting("VERIFICATION_CODE_TTL_MINUTES", 15))
    PASSWORD_RESET_TTL_HOURS = int(setting("PASSWORD_RESET_TTL_HOURS", 4))

    # Brute-force protection
    LOCKOUT_MAX_ATTEMPTS = int(setting("LOCKOUT_MAX_ATTEMPTS", 5))
    LOCKOUT_DURATION_MINUTES = int(setting("LOCKOUT_DURATION_MINUTES", 15))
    RATE_LIMITS = setting("RATE_LIMITS", {})  # prefix -> {limit, window_seconds}

    # Store timeouts
    STORE_TIMEOUT_SECONDS = float(setting("STORE_TIMEOUT_SECONDS", 5.0))
    RATE_LIMIT_TIMEOUT_SECONDS = float(setting("RATE_LIMIT_TIMEOUT_SECONDS", 0.5))
