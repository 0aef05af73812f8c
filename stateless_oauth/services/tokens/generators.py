"""Registered token generators, resolved by name at configuration time."""

from __future__ import annotations

import logging
from collections.abc import Callable

from stateless_oauth.services._shared.errors import (
    GeneratorError,
    GeneratorNotFound,
    GeneratorUnusable,
)
from stateless_oauth.services._shared.ports.subject_lookup import SubjectLookup
from stateless_oauth.services._shared.ports.token_generator import TokenGenerator
from stateless_oauth.services.tokens.codec import SignedTokenCodec
from stateless_oauth.services.tokens.settings import TokenSettings

log = logging.getLogger(__name__)

GeneratorFactory = Callable[[TokenSettings], TokenGenerator]

DEFAULT_GENERATOR = "jwt"

_REGISTRY: dict[str, GeneratorFactory] = {}


def register_generator(name: str, factory: GeneratorFactory) -> None:
    """Make ``factory`` available under ``name`` (case-insensitive)."""
    key = name.strip().lower()
    if not key:
        raise ValueError("Generator name cannot be empty.")
    _REGISTRY[key] = factory


def registered_generators() -> list[str]:
    return sorted(_REGISTRY)


def resolve_generator(name: str | None, settings: TokenSettings) -> TokenGenerator:
    """
    Build the generator registered under ``name``.

    An empty name falls back to :data:`DEFAULT_GENERATOR`.

    :raises GeneratorNotFound: Nothing is registered under ``name``.
    :raises GeneratorUnusable: The factory fails or its product cannot ``generate``.
    """
    key = (name or DEFAULT_GENERATOR).strip().lower()
    factory = _REGISTRY.get(key)
    if factory is None:
        log.error("Unknown token generator %r (registered: %s)", key, registered_generators())
        raise GeneratorNotFound(key)
    try:
        generator = factory(settings)
    except GeneratorError:
        raise
    except Exception as exc:
        log.error("Token generator %r failed to initialize", key, exc_info=True)
        raise GeneratorUnusable(f"Token generator {key!r} failed to initialize: {exc}") from exc
    if not callable(getattr(generator, "generate", None)):
        log.error("Token generator %r has no generate()", key)
        raise GeneratorUnusable(f"Token generator {key!r} does not implement generate().")
    return generator


def build_codec(settings: TokenSettings, subject_lookup: SubjectLookup | None = None) -> SignedTokenCodec:
    return SignedTokenCodec(
        secret_key=settings.secret_key,
        algorithm=settings.algorithm,
        verify_key=settings.verify_key,
        subject_lookup=subject_lookup,
    )


def _flask_jwt_extended(settings: TokenSettings) -> TokenGenerator:
    from stateless_oauth.infra.jwt.flask_jwt_token_generator import FlaskJWTTokenGenerator

    return FlaskJWTTokenGenerator()


register_generator(DEFAULT_GENERATOR, build_codec)
register_generator("flask_jwt_extended", _flask_jwt_extended)


__all__ = [
    "DEFAULT_GENERATOR",
    "GeneratorFactory",
    "build_codec",
    "register_generator",
    "registered_generators",
    "resolve_generator",
]
