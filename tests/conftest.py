"""Pytest fixtures for the token engine.

Pure engine fixtures (codec, registry, factory, service) run on in-memory
doubles and a frozen clock. The Flask ``app`` fixture builds a fresh app per
test on in-memory SQLite and creates/drops the schema around each case.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from flask import Flask

from stateless_oauth.core.config import TestingConfig
from stateless_oauth.core.extensions import db as _db
from stateless_oauth.factory import create_app
from stateless_oauth.services._shared.ports import (
    InMemoryApplicationLookup,
    InMemoryRevocationStore,
    InMemorySubjectLookup,
    StaticClient,
)
from stateless_oauth.services.grants.service import TokenService
from stateless_oauth.services.tokens.codec import SignedTokenCodec
from stateless_oauth.services.tokens.revocation import RevocationRegistry
from stateless_oauth.services.tokens.settings import TokenSettings
from stateless_oauth.services.tokens.token_pair import TokenPairFactory
from tests.helpers.clock import FrozenClock

SECRET = "unit-test-signing-key-0123456789abcdef"


# ------------------------------ Flask app --------------------------------- #


@pytest.fixture()
def app() -> Generator[Flask, None, None]:
    """Create a Flask application configured for testing, with its schema."""
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    application = create_app(TestingConfig)
    with application.app_context():
        _db.create_all()
        yield application
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def client(app: Flask):
    return app.test_client()


@pytest.fixture()
def session(app: Flask) -> Generator[Any, None, None]:
    """Expose the Flask-scoped session and wire Factory Boy to it."""
    from tests.factories import bind_session

    bind_session(_db.session)
    yield _db.session
    bind_session(None)


# ------------------------------ Engine ------------------------------------ #


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(datetime(2024, 1, 1, 12, 0, 0, 250_000, tzinfo=UTC))


@pytest.fixture()
def settings() -> TokenSettings:
    return TokenSettings(secret_key=SECRET, access_token_expires_in=timedelta(hours=2))


@pytest.fixture()
def store() -> InMemoryRevocationStore:
    return InMemoryRevocationStore()


@pytest.fixture()
def registry(store: InMemoryRevocationStore) -> RevocationRegistry:
    return RevocationRegistry(store)


@pytest.fixture()
def subjects() -> InMemorySubjectLookup:
    return InMemorySubjectLookup({"ann@example.com": 42})


@pytest.fixture()
def codec(settings: TokenSettings, clock: FrozenClock, subjects) -> SignedTokenCodec:
    return SignedTokenCodec(
        secret_key=settings.secret_key,
        algorithm=settings.algorithm,
        subject_lookup=subjects,
        clock=clock,
    )


@pytest.fixture()
def factory(codec: SignedTokenCodec, registry: RevocationRegistry, clock: FrozenClock) -> TokenPairFactory:
    return TokenPairFactory(generator=codec, codec=codec, registry=registry, clock=clock)


@pytest.fixture()
def client_app() -> StaticClient:
    """Client ``C1`` (uid ``abc``)."""
    return StaticClient(id=1, uid="abc", secret="s3cret", scopes="read write")


@pytest.fixture()
def other_client_app() -> StaticClient:
    return StaticClient(id=2, uid="xyz", secret="0ther")


@pytest.fixture()
def applications(client_app: StaticClient, other_client_app: StaticClient) -> InMemoryApplicationLookup:
    return InMemoryApplicationLookup(client_app, other_client_app)


@pytest.fixture()
def service(factory: TokenPairFactory, settings: TokenSettings, applications) -> TokenService:
    """TokenService wired to in-memory doubles."""
    return TokenService(tokens=factory, settings=settings, applications=applications)
