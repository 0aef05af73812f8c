"""
Refresh grant (RFC 6749 §6).

Stages run in a fixed order and the first failure short-circuits the rest:

1. presence      -> ``invalid_request``
2. validity      -> ``invalid_grant`` (absent), :class:`InvalidTokenReuse` (revoked)
3. client        -> ``invalid_client``
4. client match  -> ``invalid_grant``
5. scope         -> ``invalid_scope``
6. commit        -> :class:`InvalidTokenReuse` on replay, otherwise a new pair

Validation has no side effects; only the commit stage touches the
revocation registry.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from stateless_oauth.services._shared.errors import (
    INVALID_CLIENT,
    INVALID_GRANT,
    INVALID_REQUEST,
    INVALID_SCOPE,
    GrantError,
    InvalidTokenReuse,
)
from stateless_oauth.services._shared.ports.application_lookup import (
    ApplicationLookup,
    ClientRecord,
)
from stateless_oauth.services.grants.dto import ClientCredentials
from stateless_oauth.services.tokens.scopes import ScopeChecker
from stateless_oauth.services.tokens.settings import TokenSettings, access_token_expires_in
from stateless_oauth.services.tokens.token_pair import TokenPair, TokenPairFactory

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BoundClient:
    """Client identity carried over from the presented refresh token."""

    id: int | str | None
    uid: str | None


class RefreshTokenRequest:
    """
    One refresh-token exchange.

    :param tokens: Factory that issues the new pair.
    :param settings: Lifecycle configuration (lifetime, revocation policy).
    :param refresh_token: Verified refresh-kind pair, or ``None`` when the
        presented string did not verify.
    :param credentials: Client credentials, if the client authenticated.
    :param applications: Client lookup used to authenticate ``credentials``.
    :param scope: Raw ``scope`` parameter.
    :param refresh_token_parameter: Raw ``refresh_token`` parameter.
    """

    def __init__(
        self,
        *,
        tokens: TokenPairFactory,
        settings: TokenSettings,
        refresh_token: TokenPair | None,
        credentials: ClientCredentials | None = None,
        applications: ApplicationLookup | None = None,
        scope: str | None = None,
        refresh_token_parameter: str | None = None,
    ) -> None:
        self.tokens = tokens
        self.settings = settings
        self.refresh_token = refresh_token
        self.credentials = credentials
        self.original_scopes = scope
        self.refresh_token_parameter = refresh_token_parameter
        self.error: str | None = None
        self.access_token: TokenPair | None = None

        self.client: ClientRecord | None = None
        if credentials is not None and applications is not None:
            self.client = applications.find_by_identifier_and_secret(
                credentials.uid, credentials.secret
            )

    # ------------------------------------------------------------------ #
    # Validation
    # ------------------------------------------------------------------ #

    def _stages(self) -> tuple[tuple[str, Callable[[], bool]], ...]:
        return (
            (INVALID_REQUEST, self._validate_token_presence),
            (INVALID_GRANT, self._validate_token),
            (INVALID_CLIENT, self._validate_client),
            (INVALID_GRANT, self._validate_client_match),
            (INVALID_SCOPE, self._validate_scope),
        )

    def validate(self) -> None:
        """
        Run every validation stage in order.

        :raises GrantError: For the first failing stage.
        :raises InvalidTokenReuse: The refresh token verified but is already revoked.
        """
        self.error = None
        for error, check in self._stages():
            if not check():
                self.error = error
                log.warning(
                    "Refresh grant rejected",
                    extra={
                        "grant_error": error,
                        "client_uid": self._client_uid(),
                        "reason": check.__name__.removeprefix("_validate_"),
                    },
                )
                raise GrantError(error)

    def valid(self) -> bool:
        try:
            self.validate()
        except (GrantError, InvalidTokenReuse):
            return False
        return True

    def _validate_token_presence(self) -> bool:
        return self.refresh_token is not None or bool(self.refresh_token_parameter)

    def _validate_token(self) -> bool:
        if self.refresh_token is None:
            return False
        if self.refresh_token.revoked():
            # Only a replay can present a refresh token that is already revoked.
            self._reject_reuse(self.refresh_token)
        return True

    def _validate_client(self) -> bool:
        return self.credentials is None or self.client is not None

    def _validate_client_match(self) -> bool:
        if self.client is None:
            return True
        return self.refresh_token is not None and self.refresh_token.application_uid == self.client.uid

    def _validate_scope(self) -> bool:
        if self.refresh_token is None:
            return False
        if self.original_scopes and self.original_scopes.strip():
            return ScopeChecker.valid(self.original_scopes, self.refresh_token.scopes)
        return True

    # ------------------------------------------------------------------ #
    # Commit
    # ------------------------------------------------------------------ #

    def authorize(self) -> TokenPair:
        """
        Validate, then rotate: reject replays, revoke the old refresh token
        and issue a new pair.

        Not safe to retry blindly once the old token has been revoked.

        :raises GrantError: A validation stage failed.
        :raises InvalidTokenReuse: The refresh token was already used.
        :raises GeneratorError: The generator could not mint the new pair.
        """
        self.validate()
        refresh_token = self.refresh_token
        if refresh_token is None:  # pragma: no cover
            raise GrantError(INVALID_GRANT)

        if refresh_token.revoked():
            self._reject_reuse(refresh_token)
        if self.settings.revoke_refresh_token_on_use and not refresh_token.revoke():
            # Another request recorded the revocation between our check and insert.
            self._reject_reuse(refresh_token)

        self.access_token = self.tokens.issue(
            client=self._issuing_client(refresh_token),
            subject_id=refresh_token.subject_id,
            scopes=refresh_token.scopes,
            lifetime=access_token_expires_in(self.settings, self.client),
            issue_refresh=True,
        )
        log.info(
            "Refresh token rotated",
            extra={"client_uid": refresh_token.application_uid, "subject_id": refresh_token.subject_id},
        )
        return self.access_token

    def _reject_reuse(self, refresh_token: TokenPair) -> None:
        self.error = INVALID_GRANT
        log.error(
            "Refresh token reuse detected",
            extra={
                "grant_error": "invalid_token_reuse",
                "client_uid": refresh_token.application_uid,
                "subject_id": refresh_token.subject_id,
            },
        )
        raise InvalidTokenReuse()

    def _issuing_client(self, refresh_token: TokenPair) -> ClientRecord | BoundClient:
        if self.client is not None:
            return self.client
        return BoundClient(id=refresh_token.application_id, uid=refresh_token.application_uid)

    def _client_uid(self) -> str | None:
        if self.client is not None:
            return self.client.uid
        if self.credentials is not None:
            return self.credentials.uid
        return self.refresh_token.application_uid if self.refresh_token else None


__all__ = ["BoundClient", "RefreshTokenRequest"]
