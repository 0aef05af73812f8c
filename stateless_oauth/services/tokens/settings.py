"""Token engine configuration consumed by the service layer."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from stateless_oauth.services._shared.ports.application_lookup import ClientRecord

LifetimePolicy = Callable[[ClientRecord | None], timedelta | int | None]


def is_symmetric(algorithm: str) -> bool:
    """HMAC algorithms sign and verify with the same secret."""
    return str(algorithm).upper().startswith("HS")


def _as_timedelta(value: timedelta | int | float) -> timedelta:
    return value if isinstance(value, timedelta) else timedelta(seconds=value)


@dataclass(frozen=True, slots=True)
class TokenSettings:
    """
    Signing and lifecycle configuration.

    :param secret_key: Signing key material (the private key for RS*/ES*/PS*).
    :param algorithm: Signature algorithm name.
    :param verify_key: Public key for asymmetric algorithms, ``None`` for HMAC.
    :param access_token_expires_in: Default token lifetime.
    :param refresh_token_enabled: Whether grants issue refresh tokens.
    :param revoke_refresh_token_on_use: Whether the refresh grant revokes the
        presented refresh token immediately.
    :param generator: Registered generator name.
    :param custom_access_token_expires_in: Optional per-client lifetime policy.
    """

    secret_key: str
    algorithm: str = "HS256"
    verify_key: str | None = None
    access_token_expires_in: timedelta = timedelta(hours=2)
    refresh_token_enabled: bool = True
    revoke_refresh_token_on_use: bool = True
    generator: str = "jwt"
    custom_access_token_expires_in: LifetimePolicy | None = None

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> TokenSettings:
        """Build settings from a Flask-style config mapping.

        Asymmetric algorithms sign with ``JWT_PRIVATE_KEY`` (falling back to
        ``JWT_SECRET_KEY``) and verify with ``JWT_PUBLIC_KEY``, the same keys
        Flask-JWT-Extended reads.
        """
        algorithm = config.get("JWT_ALGORITHM") or "HS256"
        symmetric = is_symmetric(algorithm)
        private_key = None if symmetric else config.get("JWT_PRIVATE_KEY")
        return cls(
            secret_key=private_key or config.get("JWT_SECRET_KEY") or "",
            algorithm=algorithm,
            verify_key=None if symmetric else config.get("JWT_PUBLIC_KEY"),
            access_token_expires_in=_as_timedelta(config.get("ACCESS_TOKEN_EXPIRES_IN", 7200)),
            refresh_token_enabled=bool(config.get("REFRESH_TOKEN_ENABLED", True)),
            revoke_refresh_token_on_use=bool(config.get("REVOKE_REFRESH_TOKEN_ON_USE", True)),
            generator=config.get("ACCESS_TOKEN_GENERATOR") or "jwt",
            custom_access_token_expires_in=config.get("CUSTOM_ACCESS_TOKEN_EXPIRES_IN"),
        )


def access_token_expires_in(settings: TokenSettings, client: ClientRecord | None) -> timedelta:
    """Lifetime for a token issued to ``client``: custom policy first, then the default."""
    if settings.custom_access_token_expires_in is not None:
        custom = settings.custom_access_token_expires_in(client)
        if custom is not None:
            return _as_timedelta(custom)
    return settings.access_token_expires_in


__all__ = ["TokenSettings", "LifetimePolicy", "access_token_expires_in", "is_symmetric"]
