"""
Token pair entity and its factory.

A :class:`TokenPair` is an immutable view over one grant: its attributes,
the encoded ``token`` and optional ``refresh_token``. Pairs are created
either by :meth:`TokenPairFactory.issue` (fresh grant) or by
:meth:`TokenPairFactory.from_token_string` (read-only view of a verified
token). Revocation mutates the registry, never the pair.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from stateless_oauth.services._shared.errors import DecodeError, GeneratorUnusable
from stateless_oauth.services._shared.ports.application_lookup import ClientRecord
from stateless_oauth.services._shared.ports.token_generator import TokenGenerator
from stateless_oauth.services.tokens.claims import TokenKind, from_millis, to_millis, utc_now
from stateless_oauth.services.tokens.codec import Clock, SignedTokenCodec
from stateless_oauth.services.tokens.revocation import RevocationRegistry
from stateless_oauth.services.tokens.scopes import Scopes, scopes_match

log = logging.getLogger(__name__)

BEARER = "bearer"
_MS = timedelta(milliseconds=1)


@dataclass(frozen=True, slots=True, eq=False)
class TokenPair:
    """
    Access/refresh pair for one grant.

    :ivar application_id: Internal client id (``None`` for clientless grants
        and for views rebuilt from a token, which only carry the public uid).
    :ivar application_uid: Public client identifier bound into the claims.
    :ivar subject_id: Resource owner identifier.
    :ivar scopes: Granted scopes.
    :ivar created_at: Issue instant shared by both tokens.
    :ivar expires_in: Lifetime shared by both tokens.
    :ivar use_refresh_token: Whether a refresh token was issued.
    :ivar kind: Role of the token this pair was built around.
    :ivar token: Encoded access token (or the decoded token for views).
    :ivar refresh_token: Encoded refresh token, if any.
    """

    application_id: int | str | None
    application_uid: str | None
    subject_id: str
    scopes: Scopes
    created_at: datetime
    expires_in: timedelta
    use_refresh_token: bool
    kind: TokenKind
    token: str
    refresh_token: str | None
    registry: RevocationRegistry = field(repr=False)
    clock: Clock = field(default=utc_now, repr=False)

    # ------------------------------------------------------------------ #
    # Expiry
    # ------------------------------------------------------------------ #

    @property
    def expires_at(self) -> datetime:
        return self.created_at + self.expires_in

    def expired(self) -> bool:
        return self.clock() > self.expires_at

    def expires_in_seconds(self) -> int:
        """Remaining lifetime in whole seconds, never negative."""
        remaining = self.expires_at - self.clock()
        return max(0, int(remaining.total_seconds()))

    # ------------------------------------------------------------------ #
    # Revocation
    # ------------------------------------------------------------------ #

    @property
    def encoded(self) -> str:
        """The encoded string this pair answers for."""
        if self.kind is TokenKind.REFRESH and self.refresh_token:
            return self.refresh_token
        return self.token

    def revoked(self) -> bool:
        return self.registry.is_revoked(self.encoded)

    def revoke(self) -> bool:
        """
        Denylist the refresh token of a refresh-kind pair.

        Access-kind pairs are left alone. Revoking twice is harmless.

        :returns: ``True`` when this call created the revocation record.
        """
        if self.kind is not TokenKind.REFRESH or not self.refresh_token:
            return False
        return self.registry.record(self.refresh_token)

    # ------------------------------------------------------------------ #
    # Checks
    # ------------------------------------------------------------------ #

    def accessible(self) -> bool:
        return not self.expired() and not self.revoked()

    def includes_scope(self, *wanted: str) -> bool:
        return self.scopes.includes(*wanted)

    def acceptable(self, scopes: Scopes | str | list[str] | None = None) -> bool:
        """Not expired, not revoked, and holding one of ``scopes`` (or nothing asked)."""
        return self.accessible() and self.includes_scope(*Scopes.coerce(scopes))

    def matches_scopes(self, requested: Scopes | str | None, app_scopes: Scopes | str | None = None) -> bool:
        return scopes_match(self.scopes, requested, app_scopes)

    def same_credential(self, other: TokenPair | None) -> bool:
        """Same client and same subject.

        Views rebuilt from a token only know the client uid, so internal ids
        are compared only when both sides have one.
        """
        if other is None:
            return False
        if self.application_id is not None and other.application_id is not None:
            same_client = self.application_id == other.application_id
        else:
            same_client = self.application_uid == other.application_uid
        return same_client and self.subject_id == other.subject_id

    def token_type(self) -> str:
        return BEARER

    # ------------------------------------------------------------------ #
    # Views
    # ------------------------------------------------------------------ #

    @property
    def scopes_string(self) -> str:
        return str(self.scopes)

    def as_json(self) -> dict[str, Any]:
        """Introspection view (no token material)."""
        return {
            "resource_owner_id": self.subject_id,
            "scope": self.scopes.all(),
            "expires_in": self.expires_in_seconds(),
            "application": {"uid": self.application_uid},
            "created_at": to_millis(self.created_at) // 1000,
        }


class TokenPairFactory:
    """
    Build :class:`TokenPair` instances.

    :param generator: Strategy that mints token strings (the codec by default).
    :param codec: Verifier used to rebuild pairs from token strings.
    :param registry: Revocation registry shared by every pair.
    :param clock: Source of "now" for issuing and expiry checks.
    """

    def __init__(
        self,
        *,
        generator: TokenGenerator,
        codec: SignedTokenCodec,
        registry: RevocationRegistry,
        clock: Clock | None = None,
    ) -> None:
        self.generator = generator
        self.codec = codec
        self.registry = registry
        self.clock = clock or codec.clock

    def issue(
        self,
        *,
        client: ClientRecord | None,
        subject_id: str | int,
        scopes: Scopes | str | list[str] | None,
        lifetime: timedelta,
        issue_refresh: bool,
    ) -> TokenPair:
        """
        Mint sibling access (and optionally refresh) tokens for one grant.

        Both tokens share subject, client, scopes and issue instant.

        :raises GeneratorUnusable: If the generator cannot produce a token, or
            ``lifetime`` runs past the representable date range.
        """
        granted = Scopes.coerce(scopes)
        # Millisecond precision so the issued view matches a decoded one.
        issued_at = from_millis(to_millis(self.clock()))
        try:
            issued_at + lifetime
        except OverflowError as exc:
            raise GeneratorUnusable("Token lifetime runs past the representable date range.") from exc
        client_uid = client.uid if client is not None else None
        common: dict[str, Any] = {
            "subject_id": str(subject_id),
            "scopes": granted.all(),
            "client_uid": client_uid,
            "issued_at": issued_at,
            "lifetime": lifetime,
        }

        token = self._generate(kind=TokenKind.ACCESS, **common)
        refresh_token = self._generate(kind=TokenKind.REFRESH, **common) if issue_refresh else None

        log.debug(
            "Issued token pair",
            extra={"client_uid": client_uid, "subject_id": str(subject_id)},
        )
        return TokenPair(
            application_id=client.id if client is not None else None,
            application_uid=client_uid,
            subject_id=str(subject_id),
            scopes=granted,
            created_at=issued_at,
            expires_in=timedelta(milliseconds=lifetime // _MS),
            use_refresh_token=refresh_token is not None,
            kind=TokenKind.ACCESS,
            token=token,
            refresh_token=refresh_token,
            registry=self.registry,
            clock=self.clock,
        )

    def _generate(self, **kwargs: Any) -> str:
        token = self.generator.generate(**kwargs)
        if not isinstance(token, str) or not token:
            raise GeneratorUnusable("Token generator returned an empty token.")
        return token

    def from_token_string(self, value: str | None) -> TokenPair | None:
        """
        Rebuild a read-only pair from a token string.

        :returns: ``None`` for a missing, malformed, tampered or expired token.
        """
        if not value:
            return None
        try:
            claims = self.codec.decode(value)
        except DecodeError as exc:
            log.debug("Token rejected", extra={"reason": exc.reason})
            return None

        is_refresh = claims.kind is TokenKind.REFRESH
        return TokenPair(
            application_id=None,
            application_uid=claims.client_uid,
            subject_id=claims.subject_id,
            scopes=Scopes(claims.scopes),
            created_at=claims.issued_at,
            expires_in=claims.lifetime,
            use_refresh_token=is_refresh,
            kind=claims.kind,
            token=value,
            refresh_token=value if is_refresh else None,
            registry=self.registry,
            clock=self.clock,
        )

    def by_token(self, value: str | None) -> TokenPair | None:
        """Access-token view; refresh tokens are not accepted here."""
        pair = self.from_token_string(value)
        return pair if pair is not None and pair.kind is TokenKind.ACCESS else None

    def by_refresh_token(self, value: str | None) -> TokenPair | None:
        pair = self.from_token_string(value)
        return pair if pair is not None and pair.kind is TokenKind.REFRESH else None


__all__ = ["BEARER", "TokenPair", "TokenPairFactory"]
