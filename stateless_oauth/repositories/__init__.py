"""Repository package exposing persistence-layer access for the OAuth models."""

from __future__ import annotations

from stateless_oauth.repositories.application import ApplicationRepository
from stateless_oauth.repositories.base import BaseRepository
from stateless_oauth.repositories.revoked_token import RevokedTokenRepository
from stateless_oauth.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "ApplicationRepository",
    "RevokedTokenRepository",
    "UserRepository",
]
