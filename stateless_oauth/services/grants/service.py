# stateless_oauth/services/grants/service.py
from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from flask import Flask, current_app

from stateless_oauth.services._shared.base import BaseService, ServiceContext
from stateless_oauth.services._shared.ports.application_lookup import (
    ApplicationLookup,
    ClientRecord,
)
from stateless_oauth.services._shared.ports.revocation_store import (
    InMemoryRevocationStore,
    RevocationStore,
)
from stateless_oauth.services.grants.dto import RefreshIn, TokenPairOut
from stateless_oauth.services.grants.refresh_token import RefreshTokenRequest
from stateless_oauth.services.tokens.generators import build_codec, resolve_generator
from stateless_oauth.services.tokens.revocation import RevocationRegistry
from stateless_oauth.services.tokens.scopes import Scopes
from stateless_oauth.services.tokens.settings import TokenSettings, access_token_expires_in
from stateless_oauth.services.tokens.token_pair import TokenPair, TokenPairFactory

if TYPE_CHECKING:
    from stateless_oauth.services._shared.ports.subject_lookup import SubjectLookup

log = logging.getLogger(__name__)

EXTENSION_KEY = "token_service"


class TokenService(BaseService):
    """
    Token lifecycle service (issue / refresh / revoke / authenticate).

    Tokens are self-contained signed strings; the only server-side state is
    the revocation registry.
    """

    def __init__(
        self,
        *,
        tokens: TokenPairFactory,
        settings: TokenSettings,
        applications: ApplicationLookup | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param tokens: Factory issuing and decoding token pairs.
        :param settings: Lifecycle configuration.
        :param applications: Client lookup for authenticated grants.
        :param ctx: Optional request-scoped context.
        """
        super().__init__(ctx=ctx)
        self.tokens = tokens
        self.settings = settings
        self.applications = applications

    @property
    def registry(self) -> RevocationRegistry:
        return self.tokens.registry

    # ------------------------------------------------------------------ #
    # Issue
    # ------------------------------------------------------------------ #

    def issue(
        self,
        *,
        client: ClientRecord | None,
        subject_id: str | int,
        scopes: Scopes | str | None = None,
        lifetime: timedelta | None = None,
        issue_refresh: bool | None = None,
    ) -> TokenPairOut:
        """
        Issue a fresh pair for an already-authorized grant.

        :param lifetime: Overrides the configured lifetime policy.
        :param issue_refresh: Overrides ``refresh_token_enabled``.
        :raises GeneratorError: If the generator cannot mint tokens.
        """
        pair = self.tokens.issue(
            client=client,
            subject_id=subject_id,
            scopes=scopes,
            lifetime=lifetime if lifetime is not None else access_token_expires_in(self.settings, client),
            issue_refresh=(
                self.settings.refresh_token_enabled if issue_refresh is None else issue_refresh
            ),
        )
        return TokenPairOut.from_pair(pair)

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange a refresh token for a new pair.

        :raises GrantError: A validation stage failed.
        :raises InvalidTokenReuse: The refresh token was already used.
        """
        request = RefreshTokenRequest(
            tokens=self.tokens,
            settings=self.settings,
            refresh_token=self.tokens.by_refresh_token(dto.refresh_token),
            credentials=dto.credentials,
            applications=self.applications,
            scope=dto.scope,
            refresh_token_parameter=dto.refresh_token,
        )
        return TokenPairOut.from_pair(request.authorize())

    # ------------------------------------------------------------------ #
    # Revoke / authenticate
    # ------------------------------------------------------------------ #

    def revoke(self, token: str) -> bool:
        """
        Denylist any well-formed token string. Idempotent.

        :returns: ``True`` when this call created the record.
        :raises ValidationError: If ``token`` is not shaped like a signed token.
        """
        inserted = self.registry.record(token)
        log.info(
            "Token revoked",
            extra=self.ctx.log_extra(reason="explicit" if inserted else "already_revoked"),
        )
        return inserted

    def authenticate(self, token: str | None, scopes: Scopes | str | None = None) -> TokenPair | None:
        """Return the access-token pair when it is acceptable for ``scopes``, else ``None``."""
        pair = self.tokens.by_token(token)
        if pair is None or not pair.acceptable(scopes):
            return None
        return pair


# ---------------------------------------------------------------------- #
# Wiring
# ---------------------------------------------------------------------- #


def _revocation_store(app: Flask) -> RevocationStore:
    backend = str(app.config.get("REVOCATION_BACKEND", "sqlalchemy")).strip().lower()
    if backend == "memory":
        return InMemoryRevocationStore()
    if backend == "redis":
        from stateless_oauth.core.extensions import get_redis
        from stateless_oauth.infra.redis import RedisRevocationStore

        return RedisRevocationStore(get_redis())
    if backend == "sqlalchemy":
        from stateless_oauth.infra.sqlalchemy import SQLAlchemyRevocationStore

        return SQLAlchemyRevocationStore()
    raise ValueError(f"Unknown REVOCATION_BACKEND: {backend!r}")


def build_token_service(
    app: Flask,
    *,
    store: RevocationStore | None = None,
    applications: ApplicationLookup | None = None,
    subjects: SubjectLookup | None = None,
) -> TokenService:
    """
    Assemble a :class:`TokenService` from ``app.config``.

    Collaborators default to the SQLAlchemy adapters and the configured
    revocation backend.

    :raises GeneratorError: If the configured generator is unknown or unusable.
    """
    from stateless_oauth.infra.sqlalchemy import (
        SQLAlchemyApplicationLookup,
        SQLAlchemySubjectLookup,
    )

    settings = TokenSettings.from_mapping(app.config)
    codec = build_codec(settings, subjects or SQLAlchemySubjectLookup())
    generator = resolve_generator(settings.generator, settings)
    registry = RevocationRegistry(store or _revocation_store(app))
    tokens = TokenPairFactory(generator=generator, codec=codec, registry=registry)
    return TokenService(
        tokens=tokens,
        settings=settings,
        applications=applications or SQLAlchemyApplicationLookup(),
    )


def init_app(app: Flask, *, store: RevocationStore | None = None) -> None:
    """Build the token service once so misconfiguration fails at startup."""
    app.extensions[EXTENSION_KEY] = build_token_service(app, store=store)


def get_token_service() -> TokenService:
    """Return the token service of the current app."""
    try:
        return current_app.extensions[EXTENSION_KEY]
    except KeyError:
        raise RuntimeError("Token service is not initialized. Call init_app() first.") from None


__all__ = [
    "TokenService",
    "build_token_service",
    "get_token_service",
    "init_app",
]
