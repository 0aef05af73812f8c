"""JSON logging for the token engine.

Records carry the request correlation id and the engine's structured
``extra=`` fields. Anything shaped like a signed token is masked before it
reaches a handler, so bearer credentials never end up in log storage.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, Response, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = ("X-Request-ID", "X-Correlation-ID")

# ``extra=`` keys attached by the grant, registry and generator code
EXTRA_KEYS = ("grant_error", "client_uid", "subject_id", "token_kind", "reason")

# Compact JWS: base64url JSON header (always starts with ``eyJ``), payload, signature
_TOKEN_PATTERN = re.compile(r"eyJ[A-Za-z0-9_\-]*\.[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]*")
REDACTED = "[token]"


def redact_tokens(text: str) -> str:
    """Replace every signed-token-looking substring of ``text``."""
    return _TOKEN_PATTERN.sub(REDACTED, text)


class JSONFormatter(logging.Formatter):
    """Render a record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_tokens(record.getMessage()),
            "request_id": getattr(record, "request_id", None),
        }
        payload.update(
            {key: getattr(record, key) for key in EXTRA_KEYS if getattr(record, key, None) is not None}
        )
        if record.exc_info:
            payload["exc_info"] = redact_tokens(self.formatException(record.exc_info))
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp ``request_id`` on every record (``None`` outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


def ensure_request_id() -> str:
    """
    Return the correlation id of the current request.

    The first of ``X-Request-ID`` / ``X-Correlation-ID`` wins; otherwise a
    uuid4 is minted and cached on ``flask.g``. Outside a request every call
    returns a fresh uuid4.
    """
    if not has_request_context():
        return str(uuid4())
    cached = getattr(g, "request_id", None)
    if cached:
        return cached
    incoming = next((request.headers[h] for h in CORRELATION_HEADERS if request.headers.get(h)), None)
    g.request_id = incoming or str(uuid4())
    return g.request_id


def _level(value: str | int) -> int | str:
    if isinstance(value, int):
        return value
    resolved = logging.getLevelName(value.upper())
    return resolved if isinstance(resolved, int) else value.upper()


def configure_logging(level: str | int = "INFO") -> None:
    """Send every record to stdout as JSON, replacing existing root handlers."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_level(level))


def init_app(app: Flask) -> None:
    """Seed the correlation id per request and echo it on every response."""

    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _seed_request_id() -> None:
        ensure_request_id()

    @app.after_request
    def _echo_request_id(response: Response) -> Response:
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = [
    "JSONFormatter",
    "REDACTED",
    "configure_logging",
    "ensure_request_id",
    "init_app",
    "redact_tokens",
]
