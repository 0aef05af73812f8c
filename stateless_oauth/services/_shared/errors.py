"""
Domain-level exceptions used within the token engine.

These exceptions are **framework-agnostic** and never import or depend on
Flask, HTTP, or SQLAlchemy. The translation to RFC 6749 error responses is
handled by ``stateless_oauth/core/errors.py``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer or BaseService translates them to ``OAuthError``.
    """

    pass


# --------------------------------------------------------------------------- #
# Token decoding
# --------------------------------------------------------------------------- #


class DecodeError(ServiceError):
    """A token string could not be turned into a verified claim set."""

    reason: ClassVar[str] = "invalid"


class MalformedTokenError(DecodeError):
    """The string is not structurally a signed token, or a claim is unusable."""

    reason = "malformed"


class BadSignatureError(DecodeError):
    """The signature does not verify with the configured key and algorithm."""

    reason = "bad_signature"


class ExpiredTokenError(DecodeError):
    """The token verified but its lifetime has elapsed."""

    reason = "expired"


# --------------------------------------------------------------------------- #
# Registry input / lookups
# --------------------------------------------------------------------------- #


class ValidationError(ServiceError):
    """Raised when input does not have the shape an operation requires."""


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "Application").
    :param key: Identifier or search key.
    """

    entity: str
    key: str | int

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.entity} not found: {self.key}"


# --------------------------------------------------------------------------- #
# Refresh grant
# --------------------------------------------------------------------------- #

INVALID_REQUEST = "invalid_request"
INVALID_GRANT = "invalid_grant"
INVALID_CLIENT = "invalid_client"
INVALID_SCOPE = "invalid_scope"

_DESCRIPTIONS = {
    INVALID_REQUEST: "The request is missing a required parameter.",
    INVALID_GRANT: "The provided authorization grant is invalid, expired, revoked, "
    "or was issued to another client.",
    INVALID_CLIENT: "Client authentication failed.",
    INVALID_SCOPE: "The requested scope is invalid, unknown, or malformed.",
}


class GrantError(ServiceError):
    """
    A refresh-grant validation stage failed.

    :param error: One of ``invalid_request``, ``invalid_grant``,
        ``invalid_client`` or ``invalid_scope``.
    """

    def __init__(self, error: str, description: str | None = None) -> None:
        if error not in _DESCRIPTIONS:
            raise ValueError(f"Unknown grant error code: {error!r}")
        self.error = error
        self.description = description or _DESCRIPTIONS[error]
        super().__init__(self.description)

    def __repr__(self) -> str:
        return f"GrantError({self.error!r})"


class InvalidTokenReuse(ServiceError):
    """
    A refresh token that was already revoked was presented again.

    Deliberately *not* a :class:`GrantError`: a replayed credential must stay
    distinguishable from one that never existed.
    """

    def __init__(self, message: str = "Refresh token was already used.") -> None:
        super().__init__(message)


# --------------------------------------------------------------------------- #
# Configuration
# --------------------------------------------------------------------------- #


class GeneratorError(ServiceError):
    """The configured token generator cannot be used (deployment-level fault)."""


class GeneratorNotFound(GeneratorError):
    """No generator is registered under the configured name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Token generator {name!r} is not registered.")


class GeneratorUnusable(GeneratorError):
    """The generator exists but cannot produce tokens."""
