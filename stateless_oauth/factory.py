"""Application factory hosting the token engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Flask

from stateless_oauth.core.config import CONFIG_MAP, BaseConfig, check_signing_key, get_config
from stateless_oauth.core.logger import configure_logging, init_app as init_logging

if TYPE_CHECKING:
    from stateless_oauth.services._shared.ports.revocation_store import RevocationStore


def _resolve_config(config: str | type[BaseConfig] | object | None) -> object:
    if config is None:
        return get_config()
    if isinstance(config, str):
        return CONFIG_MAP[config.strip().lower()]
    return config


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    revocation_store: RevocationStore | None = None,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build a Flask app with the token service in ``app.extensions``.

    :param config: Config class/object, a ``CONFIG_MAP`` name, or ``None``
        for the ``APP_ENV`` default.
    :param revocation_store: Overrides the store picked by
        ``REVOCATION_BACKEND``.
    :raises RuntimeError: ``REQUIRE_STRONG_KEYS`` is set and the signing key is weak.
    :raises GeneratorError: ``ACCESS_TOKEN_GENERATOR`` is unknown or unusable.
        The token service is wired last so this surfaces at startup.
    """
    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(_resolve_config(config))
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)
    if app.config.get("REQUIRE_STRONG_KEYS"):
        check_signing_key(app.config)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from stateless_oauth.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from stateless_oauth.core import errors

    errors.init_app(app)

    from stateless_oauth.services.grants import service as token_service

    token_service.init_app(app, store=revocation_store)

    return app
