"""Claim set carried inside every signed token."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any
from uuid import uuid4


class TokenKind(str, Enum):
    """Role of a token inside its pair."""

    ACCESS = "access"
    REFRESH = "refresh"


_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_MS = timedelta(milliseconds=1)


def utc_now() -> datetime:
    return datetime.now(UTC)


def to_millis(value: datetime) -> int:
    """Epoch milliseconds of an aware (or UTC-labelled naive) datetime, truncated."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return (value - _EPOCH) // _MS


def from_millis(value: int) -> datetime:
    return _EPOCH + timedelta(milliseconds=value)


def _dedupe(scopes: Iterable[str]) -> tuple[str, ...]:
    seen: list[str] = []
    for scope in scopes:
        if scope not in seen:
            seen.append(scope)
    return tuple(seen)


@dataclass(frozen=True, slots=True)
class ClaimSet:
    """
    Payload of a signed token.

    Sibling access/refresh claim sets of one pair share ``subject_id``,
    ``client_uid``, ``scopes`` and ``issued_at`` exactly and differ only in
    ``kind`` (and ``jti``).

    :ivar subject_id: Stable subject (resource owner) identifier.
    :ivar client_uid: Public identifier of the client, ``None`` for public grants.
    :ivar scopes: Granted scope names, duplicates removed.
    :ivar kind: ``access`` or ``refresh``.
    :ivar issued_at: Issue instant, UTC, millisecond precision.
    :ivar lifetime: Validity window, millisecond precision.
    :ivar jti: Unique token identifier.
    """

    subject_id: str
    client_uid: str | None
    scopes: tuple[str, ...]
    kind: TokenKind
    issued_at: datetime
    lifetime: timedelta
    jti: str = field(default_factory=lambda: uuid4().hex)

    def __post_init__(self) -> None:
        # Normalize so encode/decode is lossless.
        object.__setattr__(self, "subject_id", str(self.subject_id))
        object.__setattr__(self, "scopes", _dedupe(str(s) for s in self.scopes))
        object.__setattr__(self, "kind", TokenKind(self.kind))
        object.__setattr__(self, "issued_at", from_millis(to_millis(self.issued_at)))
        lifetime_ms = self.lifetime // _MS
        if lifetime_ms < 0:
            raise ValueError("Token lifetime cannot be negative.")
        object.__setattr__(self, "lifetime", timedelta(milliseconds=lifetime_ms))
        try:
            self.issued_at + self.lifetime
        except OverflowError as exc:
            raise ValueError("Token expiry is outside the representable date range.") from exc

    @property
    def expires_at(self) -> datetime:
        return self.issued_at + self.lifetime

    def sibling(self, kind: TokenKind) -> ClaimSet:
        """Same grant, different role, fresh ``jti``."""
        return ClaimSet(
            subject_id=self.subject_id,
            client_uid=self.client_uid,
            scopes=self.scopes,
            kind=kind,
            issued_at=self.issued_at,
            lifetime=self.lifetime,
        )

    # ------------------------------------------------------------------ #
    # Wire mapping
    # ------------------------------------------------------------------ #

    def to_payload(self) -> dict[str, Any]:
        """Canonical JWT payload.

        ``iat``/``exp`` are whole seconds for interoperability (``exp`` rounded
        up so third-party verifiers never reject early); ``iat_ms`` and
        ``expires_in_ms`` carry the exact values.
        """
        iat_ms = to_millis(self.issued_at)
        lifetime_ms = self.lifetime // _MS
        return {
            "sub": self.subject_id,
            "client_uid": self.client_uid,
            "scopes": list(self.scopes),
            "type": self.kind.value,
            "iat": iat_ms // 1000,
            "exp": math.ceil((iat_ms + lifetime_ms) / 1000),
            "iat_ms": iat_ms,
            "expires_in_ms": lifetime_ms,
            "jti": self.jti,
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], *, subject_id: str | None = None) -> ClaimSet:
        """
        Rebuild a claim set from a verified payload.

        :param subject_id: Pre-resolved subject, used when the payload names
            its subject indirectly (see ``SignedTokenCodec``).
        :raises KeyError, TypeError, ValueError, OverflowError: on any missing or
            unusable claim.
        """
        subject = subject_id if subject_id is not None else payload["sub"]
        if subject is None or str(subject) == "":
            raise ValueError("Token subject is empty.")

        client_uid = payload.get("client_uid")
        if client_uid is not None and not isinstance(client_uid, str):
            raise TypeError("client_uid must be a string.")

        raw_scopes = payload.get("scopes", [])
        if isinstance(raw_scopes, str):
            raw_scopes = [s for s in raw_scopes.split(" ") if s]
        if not isinstance(raw_scopes, list) or not all(isinstance(s, str) for s in raw_scopes):
            raise TypeError("scopes must be a list of strings.")

        if "iat_ms" in payload:
            iat_ms = int(payload["iat_ms"])
            lifetime_ms = int(payload["expires_in_ms"])
        else:
            # Tokens minted elsewhere only carry whole-second claims.
            iat_ms = int(payload["iat"]) * 1000
            lifetime_ms = (int(payload["exp"]) - int(payload["iat"])) * 1000

        jti = payload.get("jti") or uuid4().hex
        return cls(
            subject_id=str(subject),
            client_uid=client_uid,
            scopes=tuple(raw_scopes),
            kind=TokenKind(payload["type"]),
            issued_at=from_millis(iat_ms),
            lifetime=timedelta(milliseconds=lifetime_ms),
            jti=str(jti),
        )


__all__ = ["ClaimSet", "TokenKind", "utc_now", "to_millis", "from_millis"]
