"""Environment-driven settings for the token engine.

One class per deployment flavour, picked by ``APP_ENV``. Token lifecycle
knobs live on :class:`BaseConfig` and are read once into
:class:`~stateless_oauth.services.tokens.settings.TokenSettings` when the
app starts.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, Final

from dotenv import load_dotenv

ENV_VAR: Final[str] = "APP_ENV"
PLACEHOLDER_KEYS: Final[frozenset[str]] = frozenset({"", "CHANGE_ME", "CHANGE_ME_JWT"})
MIN_KEY_LENGTH: Final[int] = 32

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "y", "on"})

# no-op without a .env file
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """``True`` for ``1/true/yes/y/on`` (any case); ``default`` when unset."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    """Integer value of ``name``; unset or blank gives ``default``.

    :raises ValueError: If the variable is set to something non-numeric.
    """
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else default


def env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else default


class BaseConfig:
    """Settings shared by every environment.

    Attributes
    ----------
    JWT_SECRET_KEY: str
        Signs and verifies every token. ``flask-jwt-extended`` reads the same
        key, so both generators mint interchangeable tokens.
    JWT_ALGORITHM: str
        PyJWT algorithm name.
    JWT_PRIVATE_KEY, JWT_PUBLIC_KEY: str | None
        PEM keys for RS*/ES*/PS* algorithms. Tokens are signed with the
        private key and verified with the public one.
    ACCESS_TOKEN_EXPIRES_IN: int
        Default lifetime in seconds.
    REFRESH_TOKEN_ENABLED: bool
        Issue a refresh token next to each access token.
    REVOKE_REFRESH_TOKEN_ON_USE: bool
        Denylist the presented refresh token when it is exchanged.
    ACCESS_TOKEN_GENERATOR: str
        Registered generator name (``jwt`` or ``flask_jwt_extended``).
    CUSTOM_ACCESS_TOKEN_EXPIRES_IN: Callable | None
        ``(client) -> timedelta | None`` lifetime override.
    REVOCATION_BACKEND: str
        ``sqlalchemy``, ``redis`` or ``memory``.
    REDIS_URL, REDIS_SOCKET_TIMEOUT:
        Connection settings for the ``redis`` backend.
    REQUIRE_STRONG_KEYS: bool
        Refuse to start with a placeholder or short signing key.
    """

    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_PRIVATE_KEY = os.getenv("JWT_PRIVATE_KEY")
    JWT_PUBLIC_KEY = os.getenv("JWT_PUBLIC_KEY")
    REQUIRE_STRONG_KEYS = False

    ACCESS_TOKEN_EXPIRES_IN = env_int("ACCESS_TOKEN_EXPIRES_IN", 7200)
    REFRESH_TOKEN_ENABLED = env_bool("REFRESH_TOKEN_ENABLED", True)
    REVOKE_REFRESH_TOKEN_ON_USE = env_bool("REVOKE_REFRESH_TOKEN_ON_USE", True)
    ACCESS_TOKEN_GENERATOR = os.getenv("ACCESS_TOKEN_GENERATOR", "jwt")
    CUSTOM_ACCESS_TOKEN_EXPIRES_IN = None

    REVOCATION_BACKEND = os.getenv("REVOCATION_BACKEND", "sqlalchemy")
    REDIS_URL = os.getenv("REDIS_URL")
    REDIS_SOCKET_TIMEOUT = env_float("REDIS_SOCKET_TIMEOUT", 2.0)

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./oauth.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DEBUG = False
    TESTING = False
    PROPAGATE_EXCEPTIONS = False


class DevelopmentConfig(BaseConfig):
    DEBUG = env_bool("FLASK_DEBUG", True)


class TestingConfig(BaseConfig):
    """In-memory SQLite and revocations; no Redis or ``.env`` secrets needed."""

    TESTING = True
    PROPAGATE_EXCEPTIONS = True
    JWT_SECRET_KEY = "testing-secret-key-with-enough-entropy-for-hs256"
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    REVOCATION_BACKEND = "memory"
    REDIS_URL = None


class ProductionConfig(BaseConfig):
    REQUIRE_STRONG_KEYS = True


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Class named by ``APP_ENV``; unset or unknown names mean development."""
    return CONFIG_MAP.get(os.getenv(ENV_VAR, "development").strip().lower(), DevelopmentConfig)


def check_signing_key(config: Mapping[str, Any]) -> None:
    """Reject keys that would let anyone forge tokens.

    Asymmetric setups are checked on ``JWT_PRIVATE_KEY`` when it is set.

    :raises RuntimeError: If the signing key is a placeholder or shorter
        than :data:`MIN_KEY_LENGTH` characters.
    """
    key = config.get("JWT_SECRET_KEY") or ""
    if not str(config.get("JWT_ALGORITHM") or "HS256").upper().startswith("HS"):
        key = config.get("JWT_PRIVATE_KEY") or key
    if key in PLACEHOLDER_KEYS or len(key) < MIN_KEY_LENGTH:
        raise RuntimeError(
            f"JWT_SECRET_KEY must be set to a non-placeholder value of at least {MIN_KEY_LENGTH} characters."
        )
