"""Token lifecycle engine: claims, codec, scopes, token pairs, revocation and generators."""

from __future__ import annotations

from .claims import ClaimSet, TokenKind
from .codec import SignedTokenCodec
from .generators import register_generator, resolve_generator
from .revocation import RevocationRegistry
from .scopes import Scopes, ScopeChecker, scopes_match
from .settings import TokenSettings, access_token_expires_in
from .token_pair import TokenPair, TokenPairFactory

__all__ = [
    "ClaimSet",
    "TokenKind",
    "SignedTokenCodec",
    "register_generator",
    "resolve_generator",
    "RevocationRegistry",
    "Scopes",
    "ScopeChecker",
    "scopes_match",
    "TokenSettings",
    "access_token_expires_in",
    "TokenPair",
    "TokenPairFactory",
]
