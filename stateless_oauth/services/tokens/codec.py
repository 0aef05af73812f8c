"""Signed token codec backed by PyJWT."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timedelta
from typing import Any

import jwt
from jwt.algorithms import get_default_algorithms
from jwt.utils import base64url_decode, base64url_encode

from stateless_oauth.services._shared.errors import (
    BadSignatureError,
    ExpiredTokenError,
    GeneratorUnusable,
    MalformedTokenError,
)
from stateless_oauth.services._shared.ports.subject_lookup import SubjectLookup
from stateless_oauth.services.tokens.claims import ClaimSet, TokenKind, utc_now
from stateless_oauth.services.tokens.settings import is_symmetric

log = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_B64URL = re.compile(r"[A-Za-z0-9_-]*")


def _non_canonical(segment: str) -> bool:
    """Base64url segment whose unused trailing bits are set.

    Such a segment decodes to the same bytes as its canonical twin, so the
    same signature would be reachable under two different token strings.
    """
    if not _B64URL.fullmatch(segment):
        return False
    try:
        return base64url_encode(base64url_decode(segment)).decode("ascii") != segment
    except ValueError:
        return False


class SignedTokenCodec:
    """
    Encode claim sets into compact JWS strings and verify them back.

    :param secret_key: Key material (HMAC secret or PEM key).
    :param algorithm: PyJWT algorithm name, e.g. ``HS256``.
    :param verify_key: Public key, required for asymmetric algorithms and
        ignored for HMAC ones.
    :param subject_lookup: Resolves ``{"user": {"email": ...}}`` payloads to a subject id.
    :param clock: Source of "now" for the expiry check.
    :raises GeneratorUnusable: If the key or algorithm cannot be used.
    """

    def __init__(
        self,
        *,
        secret_key: str | bytes,
        algorithm: str = "HS256",
        verify_key: str | bytes | None = None,
        subject_lookup: SubjectLookup | None = None,
        clock: Clock = utc_now,
    ) -> None:
        if not secret_key:
            raise GeneratorUnusable("No signing key configured for the JWT codec.")
        algorithm = str(algorithm).upper()
        if algorithm not in get_default_algorithms():
            raise GeneratorUnusable(f"Unsupported signature algorithm: {algorithm!r}")
        if not is_symmetric(algorithm) and not verify_key:
            raise GeneratorUnusable(f"{algorithm} needs a public verification key.")
        self.secret_key = secret_key
        self.verify_key = secret_key if is_symmetric(algorithm) else verify_key
        self.algorithm = algorithm
        self.subject_lookup = subject_lookup
        self.clock = clock

    # ------------------------------------------------------------------ #
    # Encode
    # ------------------------------------------------------------------ #

    def encode(self, claims: ClaimSet) -> str:
        """Sign ``claims`` and return the ``header.payload.signature`` string."""
        try:
            return jwt.encode(claims.to_payload(), self.secret_key, algorithm=self.algorithm)
        except (jwt.exceptions.PyJWTError, ValueError, TypeError) as exc:
            raise GeneratorUnusable(f"Unable to sign token with {self.algorithm}: {exc}") from exc

    # ------------------------------------------------------------------ #
    # Decode
    # ------------------------------------------------------------------ #

    def decode(self, token: str) -> ClaimSet:
        """
        Verify ``token`` and return its claim set.

        :raises MalformedTokenError: Not a signed token, or a claim is unusable.
        :raises BadSignatureError: The signature does not verify.
        :raises ExpiredTokenError: ``issued_at + lifetime`` is in the past.
        """
        payload = self._verified_payload(token)
        try:
            claims = ClaimSet.from_payload(payload, subject_id=self._external_subject(payload))
        except (KeyError, TypeError, ValueError, OverflowError) as exc:
            raise MalformedTokenError(f"Unusable claims: {exc}") from exc

        if self.clock() > claims.expires_at:
            raise ExpiredTokenError("Token has expired.")
        return claims

    def _verified_payload(self, token: str) -> dict[str, Any]:
        if not isinstance(token, str) or token.count(".") != 2:
            raise MalformedTokenError("Token is not a three-segment JWS string.")
        if _non_canonical(token.rsplit(".", 1)[1]):
            raise BadSignatureError("Token signature is not canonically encoded.")
        try:
            # Expiry is checked with millisecond precision in ``decode``.
            payload = jwt.decode(
                token,
                self.verify_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_iat": False, "verify_nbf": False},
            )
        except jwt.exceptions.InvalidSignatureError as exc:
            raise BadSignatureError("Token signature does not verify.") from exc
        except jwt.exceptions.InvalidAlgorithmError as exc:
            raise BadSignatureError("Token is signed with an unexpected algorithm.") from exc
        except jwt.exceptions.PyJWTError as exc:
            raise MalformedTokenError(f"Token could not be decoded: {exc}") from exc
        if not isinstance(payload, Mapping):
            raise MalformedTokenError("Token payload is not an object.")
        return dict(payload)

    def _external_subject(self, payload: Mapping[str, Any]) -> str | None:
        """Resolve the subject of a token that names its owner by e-mail."""
        if "sub" in payload:
            return None
        user = payload.get("user")
        email = user.get("email") if isinstance(user, Mapping) else None
        if not email:
            return None
        if self.subject_lookup is None:
            raise MalformedTokenError("Token names its subject by e-mail but no lookup is configured.")
        subject_id = self.subject_lookup.subject_id_for(str(email))
        if subject_id is None:
            log.info("Token subject could not be resolved", extra={"reason": "unknown_subject"})
            raise MalformedTokenError("Token subject is unknown.")
        return str(subject_id)

    # Generator capability: the codec is the default token generator.
    def generate(
        self,
        *,
        subject_id: str | int,
        scopes: Iterable[str],
        client_uid: str | None,
        kind: TokenKind | str,
        issued_at: datetime,
        lifetime: timedelta,
    ) -> str:
        try:
            claims = ClaimSet(
                subject_id=str(subject_id),
                client_uid=client_uid,
                scopes=tuple(scopes),
                kind=TokenKind(kind),
                issued_at=issued_at,
                lifetime=lifetime,
            )
        except ValueError as exc:
            raise GeneratorUnusable(f"Cannot build token claims: {exc}") from exc
        return self.encode(claims)


__all__ = ["SignedTokenCodec", "Clock"]
