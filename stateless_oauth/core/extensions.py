"""Flask extension singletons used by the token engine.

``db`` backs the client/subject tables and the SQL revocation store,
``jwt`` backs the ``flask_jwt_extended`` token generator and
``redis_client`` backs the Redis revocation store.
"""

from __future__ import annotations

from datetime import timedelta

import redis  # type: ignore[import-untyped]
from flask import Flask
from flask_jwt_extended import JWTManager
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

# Constraint names are stable so the revocation store can rely on them
metadata = MetaData(
    naming_convention={
        "ix": "ix_%(table_name)s_%(column_0_name)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "pk": "pk_%(table_name)s",
    }
)

db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
jwt = JWTManager()
redis_client: redis.Redis | None = None


def _configure_jwt(app: Flask) -> None:
    """Align Flask-JWT-Extended defaults with the token lifecycle settings."""
    raw = app.config.get("ACCESS_TOKEN_EXPIRES_IN", 7200)
    lifetime = raw if isinstance(raw, timedelta) else timedelta(seconds=raw)
    app.config.setdefault("JWT_ACCESS_TOKEN_EXPIRES", lifetime)
    app.config.setdefault("JWT_REFRESH_TOKEN_EXPIRES", lifetime)
    app.config.setdefault("JWT_IDENTITY_CLAIM", "sub")
    jwt.init_app(app)


def _init_redis(app: Flask) -> None:
    global redis_client
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        redis_client = None
        app.extensions.pop("redis_client", None)
        return

    client = redis.Redis.from_url(
        redis_url,
        socket_timeout=app.config.get("REDIS_SOCKET_TIMEOUT"),
        socket_connect_timeout=app.config.get("REDIS_SOCKET_TIMEOUT"),
    )
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Revocation store unreachable at {redis_url!r}") from exc
    redis_client = client
    app.extensions["redis_client"] = client


def init_app(app: Flask) -> None:
    """Bind ``db``, ``jwt`` and (when ``REDIS_URL`` is set) Redis to ``app``.

    Parameters
    ----------
    app: flask.Flask
        Application to bind. Importing :mod:`stateless_oauth.models` here
        registers the OAuth tables on ``metadata`` before ``create_all``.

    Raises
    ------
    RuntimeError
        If ``REDIS_URL`` is set but the server does not answer ``PING``.
    """
    db.init_app(app)

    from stateless_oauth import models as _models  # noqa: F401

    _configure_jwt(app)
    _init_redis(app)


def get_redis() -> redis.Redis:
    """Return the Redis client bound by :func:`init_app`."""
    if redis_client is None:
        raise RuntimeError("Redis client is not initialized. Set REDIS_URL and call init_app().")
    return redis_client
