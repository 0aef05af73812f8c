from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from stateless_oauth.services.tokens.claims import to_millis
from stateless_oauth.services.tokens.token_pair import TokenPair

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class ClientCredentials:
    """
    Client authentication presented with a grant request.

    :param uid: Public client identifier.
    :type uid: str
    :param secret: Raw client secret.
    :type secret: str
    """

    uid: str
    secret: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for the refresh grant.

    :param refresh_token: Encoded refresh token (``refresh_token`` parameter).
    :type refresh_token: str | None
    :param scope: Requested scope string (``scope`` parameter), optional.
    :type scope: str | None
    :param credentials: Client credentials, when the client authenticated.
    :type credentials: ClientCredentials | None
    """

    refresh_token: str | None
    scope: str | None = None
    credentials: ClientCredentials | None = None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Token endpoint response (RFC 6749 §5.1).

    :param access_token: Encoded access token.
    :param token_type: Always ``bearer``.
    :param expires_in: Lifetime in seconds.
    :param refresh_token: Encoded refresh token, when one was issued.
    :param scope: Space-delimited granted scopes.
    :param created_at: Issue instant, epoch seconds.
    """

    access_token: str
    token_type: str
    expires_in: int
    refresh_token: str | None
    scope: str
    created_at: int

    @classmethod
    def from_pair(cls, pair: TokenPair) -> TokenPairOut:
        return cls(
            access_token=pair.token,
            token_type=pair.token_type(),
            expires_in=int(pair.expires_in.total_seconds()),
            refresh_token=pair.refresh_token,
            scope=pair.scopes_string,
            created_at=to_millis(pair.created_at) // 1000,
        )

    def body(self) -> dict[str, Any]:
        """JSON body; ``refresh_token`` and ``scope`` are omitted when empty."""
        out: dict[str, Any] = {
            "access_token": self.access_token,
            "token_type": self.token_type,
            "expires_in": self.expires_in,
        }
        if self.refresh_token:
            out["refresh_token"] = self.refresh_token
        if self.scope:
            out["scope"] = self.scope
        out["created_at"] = self.created_at
        return out


__all__ = ["ClientCredentials", "RefreshIn", "TokenPairOut"]
