from .dto import ClientCredentials, RefreshIn, TokenPairOut
from .refresh_token import RefreshTokenRequest
from .service import TokenService, build_token_service

__all__ = [
    "ClientCredentials",
    "RefreshIn",
    "TokenPairOut",
    "RefreshTokenRequest",
    "TokenService",
    "build_token_service",
]
