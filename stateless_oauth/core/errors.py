"""Centralized RFC 6749 §5.2 JSON error handling for the token endpoints."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify
from werkzeug.exceptions import HTTPException

from stateless_oauth.core.logger import ensure_request_id
from stateless_oauth.services._shared.errors import (
    INVALID_CLIENT,
    INVALID_GRANT,
    INVALID_REQUEST,
    GeneratorError,
    GrantError,
    InvalidTokenReuse,
    ValidationError,
)

log = logging.getLogger(__name__)

REUSE_REASON = "refresh_token_reused"


def _http_status_to_error(status_code: int) -> str:
    """Map HTTP status codes to OAuth-style error codes."""
    mapping = {
        400: INVALID_REQUEST,
        401: "unauthorized",
        403: "access_denied",
        404: "not_found",
        405: "method_not_allowed",
        415: "unsupported_media_type",
        429: "too_many_requests",
        503: "temporarily_unavailable",
    }
    return mapping.get(status_code, "server_error" if status_code >= 500 else "error")


class OAuthError(Exception):
    """
    Represent an RFC 6749 error response.

    Parameters
    ----------
    error : str
        Error code, e.g. ``invalid_grant``.
    description : str, optional
        Human-readable ``error_description``.
    status_code : int, optional
        HTTP status code. Defaults to ``400``.
    extra : dict[str, Any] | None, optional
        Additional body members (e.g. ``error_reason``).
    headers : dict[str, str] | None, optional
        Response headers (``WWW-Authenticate`` for ``invalid_client``).
    """

    def __init__(
        self,
        error: str,
        description: str | None = None,
        status_code: int = 400,
        extra: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(description or error)
        self.error = error
        self.description = description
        self.status_code = int(status_code)
        self.extra = extra or {}
        self.headers = headers or {}

    def body(self) -> dict[str, Any]:
        out: dict[str, Any] = {"error": self.error}
        if self.description:
            out["error_description"] = self.description
        out.update(self.extra)
        out["request_id"] = ensure_request_id()
        return out

    def to_response(self) -> tuple[Response, int, dict[str, str]]:
        resp = jsonify(self.body())
        # Token responses must never be cached (RFC 6749 §5.1).
        resp.headers["Cache-Control"] = "no-store"
        resp.headers["Pragma"] = "no-cache"
        return resp, self.status_code, self.headers


def from_service_error(exc: Exception) -> Exception:
    """
    Map domain exceptions to :class:`OAuthError`.

    Anything without a mapping is returned untouched.
    """
    if isinstance(exc, GrantError):
        if exc.error == INVALID_CLIENT:
            return OAuthError(
                exc.error,
                exc.description,
                status_code=HTTPStatus.UNAUTHORIZED,
                headers={"WWW-Authenticate": 'Basic realm="oauth"'},
            )
        return OAuthError(exc.error, exc.description)

    if isinstance(exc, InvalidTokenReuse):
        return OAuthError(
            INVALID_GRANT,
            "The refresh token has already been used.",
            extra={"error_reason": REUSE_REASON},
        )

    if isinstance(exc, ValidationError):
        return OAuthError(INVALID_REQUEST, str(exc))

    if isinstance(exc, GeneratorError):
        return OAuthError(
            "server_error",
            "The authorization server is misconfigured.",
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
        )

    return exc


def init_app(app: Flask) -> None:
    """
    Attach OAuth JSON error handlers to the Flask app.

    Notes
    -----
    - Every body carries a correlation ``request_id``.
    - Replayed refresh tokens are logged at ERROR; other 4xx as warnings.
    - 5xx are logged with ``exc_info``.
    """

    @app.errorhandler(OAuthError)
    def handle_oauth_error(err: OAuthError):
        level = log.error if err.status_code >= 500 else log.warning
        level("OAuthError: error=%s status=%s", err.error, err.status_code)
        return err.to_response()

    @app.errorhandler(GrantError)
    def handle_grant_error(err: GrantError):
        log.warning("GrantError: error=%s", err.error, extra={"grant_error": err.error})
        return from_service_error(err).to_response()

    @app.errorhandler(InvalidTokenReuse)
    def handle_token_reuse(err: InvalidTokenReuse):
        log.error("InvalidTokenReuse: %s", err, extra={"reason": REUSE_REASON})
        return from_service_error(err).to_response()

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        log.warning("ValidationError: %s", err)
        return from_service_error(err).to_response()

    @app.errorhandler(GeneratorError)
    def handle_generator_error(err: GeneratorError):
        log.error("GeneratorError: %s", err, exc_info=True)
        return from_service_error(err).to_response()

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        error = _http_status_to_error(status)
        description = (err.description or error.replace("_", " ").capitalize()).strip()
        level = log.error if status >= 500 else log.warning
        level("HTTPException: error=%s status=%s", error, status)
        return OAuthError(error, description, status_code=status).to_response()

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error("Unhandled exception", exc_info=True)
        return OAuthError(
            "server_error",
            "Unexpected error",
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
        ).to_response()


__all__ = ["OAuthError", "REUSE_REASON", "from_service_error", "init_app"]
