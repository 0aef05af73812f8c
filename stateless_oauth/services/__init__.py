"""Service layer public API.

Re-exports
----------
- Base primitives (from ``stateless_oauth.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Token service (from ``stateless_oauth.services.grants``)
    * :class:`TokenService`, :func:`build_token_service`
    * DTOs: :class:`ClientCredentials`, :class:`RefreshIn`, :class:`TokenPairOut`
"""

from __future__ import annotations

from ._shared.base import BaseService, ServiceContext
from .grants.dto import ClientCredentials, RefreshIn, TokenPairOut
from .grants.service import TokenService, build_token_service

__all__ = [
    "BaseService",
    "ServiceContext",
    "TokenService",
    "build_token_service",
    "ClientCredentials",
    "RefreshIn",
    "TokenPairOut",
]
