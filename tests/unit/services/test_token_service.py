# tests/unit/services/test_token_service.py
from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from stateless_oauth.core.errors import REUSE_REASON, OAuthError
from stateless_oauth.services._shared.base import ServiceContext
from stateless_oauth.services._shared.errors import (
    INVALID_CLIENT,
    INVALID_GRANT,
    GeneratorNotFound,
    GeneratorUnusable,
    GrantError,
    InvalidTokenReuse,
    ValidationError,
)
from stateless_oauth.services.grants.dto import TokenPairOut
from stateless_oauth.services.grants.service import TokenService
from stateless_oauth.services.tokens.settings import TokenSettings, access_token_expires_in
from tests.conftest import SECRET
from tests.helpers.tokens import signature_twin

# ------------------------------ Issue ------------------------------------- #


def test_issue_uses_configured_defaults(service, client_app, clock):
    out = service.issue(client=client_app, subject_id=42, scopes="read")

    assert isinstance(out, TokenPairOut)
    assert out.token_type == "bearer"
    assert out.expires_in == 7200
    assert out.refresh_token
    assert out.scope == "read"
    assert out.created_at == int(clock().timestamp())


def test_issue_body_omits_empty_members(service, client_app):
    body = service.issue(client=client_app, subject_id=42, issue_refresh=False).body()

    assert set(body) == {"access_token", "token_type", "expires_in", "created_at"}


def test_issue_body_lists_refresh_token_and_scope(service, client_app):
    body = service.issue(client=client_app, subject_id=42, scopes="read write").body()

    assert list(body) == ["access_token", "token_type", "expires_in", "refresh_token", "scope", "created_at"]
    assert body["scope"] == "read write"


def test_issue_honours_explicit_lifetime(service, client_app):
    out = service.issue(client=client_app, subject_id=1, lifetime=timedelta(seconds=90))
    assert out.expires_in == 90


def test_refresh_tokens_can_be_disabled(factory, applications, client_app):
    settings = TokenSettings(secret_key=SECRET, refresh_token_enabled=False)
    service = TokenService(tokens=factory, settings=settings, applications=applications)

    assert service.issue(client=client_app, subject_id=1).refresh_token is None


# ------------------------------ Authenticate ------------------------------ #


def test_authenticate_returns_acceptable_access_pair(service, client_app):
    out = service.issue(client=client_app, subject_id=42, scopes="read write")

    pair = service.authenticate(out.access_token, "write")

    assert pair is not None
    assert pair.subject_id == "42"


@pytest.mark.parametrize("value", [None, "", "garbage"])
def test_authenticate_rejects_unusable_strings(service, value):
    assert service.authenticate(value) is None


def test_authenticate_rejects_refresh_tokens(service, client_app):
    out = service.issue(client=client_app, subject_id=42)
    assert service.authenticate(out.refresh_token) is None


def test_authenticate_rejects_missing_scope(service, client_app):
    out = service.issue(client=client_app, subject_id=42, scopes="read")
    assert service.authenticate(out.access_token, "admin") is None


def test_authenticate_rejects_expired_tokens(service, client_app, clock):
    out = service.issue(client=client_app, subject_id=42)
    clock.advance(hours=2, milliseconds=1)
    assert service.authenticate(out.access_token) is None


def test_authenticate_rejects_revoked_tokens(service, client_app):
    out = service.issue(client=client_app, subject_id=42)

    assert service.revoke(out.access_token) is True
    assert service.authenticate(out.access_token) is None


def test_revoked_access_token_stays_revoked_under_its_signature_twin(service, client_app):
    out = service.issue(client=client_app, subject_id=42)
    service.revoke(out.access_token)

    assert service.authenticate(signature_twin(out.access_token)) is None


def test_issue_with_unrepresentable_lifetime_fails_before_minting(service, client_app):
    with pytest.raises(GeneratorUnusable):
        service.issue(client=client_app, subject_id=42, lifetime=timedelta(days=3_000_000))


# ------------------------------ Revoke ------------------------------------ #


def test_revoke_is_idempotent(service, client_app, registry):
    out = service.issue(client=client_app, subject_id=42)

    assert service.revoke(out.refresh_token) is True
    assert service.revoke(out.refresh_token) is False
    assert registry.is_revoked(out.refresh_token) is True


def test_revoke_accepts_tokens_it_cannot_verify(service, registry):
    foreign = "eyJhbGciOiJIUzI1NiJ9.eyJzdWIiOiJ4In0.c2ln"
    assert service.revoke(foreign) is True
    assert registry.is_revoked(foreign) is True


@pytest.mark.parametrize("value", ["", "not-a-token"])
def test_revoke_rejects_malformed_input(service, value):
    with pytest.raises(ValidationError):
        service.revoke(value)


# ------------------------------ Errors ------------------------------------ #


def test_translate_exceptions_maps_grant_errors(service):
    translated = service.translate_exceptions(GrantError(INVALID_GRANT))

    assert isinstance(translated, OAuthError)
    assert translated.error == INVALID_GRANT
    assert translated.status_code == 400


def test_translate_exceptions_maps_invalid_client_to_401(service):
    translated = service.translate_exceptions(GrantError(INVALID_CLIENT))

    assert translated.status_code == 401
    assert "WWW-Authenticate" in translated.headers


def test_translate_exceptions_marks_reuse(service):
    translated = service.translate_exceptions(InvalidTokenReuse())

    assert translated.error == INVALID_GRANT
    assert translated.extra == {"error_reason": REUSE_REASON}


def test_translate_exceptions_maps_generator_errors_to_500(service):
    assert service.translate_exceptions(GeneratorNotFound("x")).status_code == 500


def test_translate_exceptions_leaves_unknown_errors(service):
    err = KeyError("x")
    assert service.translate_exceptions(err) is err


def test_grant_error_rejects_unknown_codes():
    with pytest.raises(ValueError):
        GrantError("unsupported_grant_type")


def test_service_context_defaults(service):
    assert service.ctx == ServiceContext()
    ctx = ServiceContext(request_id="r-1", client_uid="abc")
    assert TokenService(tokens=service.tokens, settings=service.settings, ctx=ctx).ctx is ctx


# ------------------------------ Settings ---------------------------------- #


def test_settings_from_flask_config():
    settings = TokenSettings.from_mapping(
        {
            "JWT_SECRET_KEY": "k",
            "JWT_ALGORITHM": "HS384",
            "ACCESS_TOKEN_EXPIRES_IN": 60,
            "REFRESH_TOKEN_ENABLED": False,
            "REVOKE_REFRESH_TOKEN_ON_USE": False,
            "ACCESS_TOKEN_GENERATOR": "flask_jwt_extended",
        }
    )

    assert settings.secret_key == "k"
    assert settings.algorithm == "HS384"
    assert settings.access_token_expires_in == timedelta(seconds=60)
    assert settings.refresh_token_enabled is False
    assert settings.revoke_refresh_token_on_use is False
    assert settings.generator == "flask_jwt_extended"


def test_settings_defaults_from_empty_config():
    settings = TokenSettings.from_mapping({})

    assert settings.algorithm == "HS256"
    assert settings.access_token_expires_in == timedelta(hours=2)
    assert settings.refresh_token_enabled is True
    assert settings.revoke_refresh_token_on_use is True
    assert settings.generator == "jwt"


def test_custom_lifetime_policy_falls_back_to_default(client_app):
    settings = TokenSettings(
        secret_key=SECRET,
        access_token_expires_in=timedelta(hours=1),
        custom_access_token_expires_in=lambda client: 600 if client is not None else None,
    )

    assert access_token_expires_in(settings, client_app) == timedelta(minutes=10)
    assert access_token_expires_in(settings, None) == timedelta(hours=1)


def test_revoke_logs_with_the_service_context(factory, settings, caplog):
    service = TokenService(tokens=factory, settings=settings, ctx=ServiceContext(client_uid="abc"))

    with caplog.at_level(logging.INFO):
        service.revoke("eyJhbGciOiJIUzI1NiJ9.eyJzdWIiOiJ4In0.c2ln")

    record = next(r for r in caplog.records if r.getMessage() == "Token revoked")
    assert record.client_uid == "abc"
    assert record.reason == "explicit"


def test_context_extras_prefer_explicit_fields():
    ctx = ServiceContext(client_uid="abc")

    assert ctx.log_extra() == {"client_uid": "abc"}
    assert ctx.log_extra(client_uid="xyz", reason="r") == {"client_uid": "xyz", "reason": "r"}
    assert ServiceContext().log_extra() == {}
