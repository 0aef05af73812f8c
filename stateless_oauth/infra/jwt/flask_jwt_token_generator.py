# stateless_oauth/infra/jwt/flask_jwt_token_generator.py
from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, cast

from stateless_oauth.services._shared.ports.token_generator import TokenGenerator
from stateless_oauth.services.tokens.claims import TokenKind, to_millis

_MS = timedelta(milliseconds=1)


@dataclass(slots=True)
class FlaskJWTTokenGenerator(TokenGenerator):
    """
    Token generator backed by Flask-JWT-Extended.

    Produces tokens the PyJWT codec can verify: identity becomes ``sub``,
    the library's ``type`` claim is the token kind, and the engine's own
    claims ride in ``additional_claims``.

    .. note::
       Requires an active Flask app context with ``JWT_SECRET_KEY`` and
       ``JWT_ALGORITHM`` matching the codec's configuration.
    """

    def _claims(
        self,
        *,
        scopes: Iterable[str],
        client_uid: str | None,
        issued_at: datetime,
        lifetime: timedelta,
    ) -> dict[str, Any]:
        iat_ms = to_millis(issued_at)
        lifetime_ms = lifetime // _MS
        return {
            "client_uid": client_uid,
            "scopes": list(scopes),
            "iat": iat_ms // 1000,
            "exp": math.ceil((iat_ms + lifetime_ms) / 1000),
            "iat_ms": iat_ms,
            "expires_in_ms": lifetime_ms,
        }

    def generate(
        self,
        *,
        subject_id: str | int,
        scopes: Iterable[str],
        client_uid: str | None,
        kind: str,
        issued_at: datetime,
        lifetime: timedelta,
    ) -> str:
        from flask_jwt_extended import create_access_token as _create_access
        from flask_jwt_extended import create_refresh_token as _create_refresh

        claims = self._claims(
            scopes=scopes, client_uid=client_uid, issued_at=issued_at, lifetime=lifetime
        )
        create = _create_refresh if TokenKind(kind) is TokenKind.REFRESH else _create_access
        return cast(
            str,
            create(
                identity=str(subject_id),
                additional_claims=claims,
                expires_delta=lifetime,
            ),
        )
