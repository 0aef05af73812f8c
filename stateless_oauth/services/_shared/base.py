# stateless_oauth/services/_shared/base.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class ServiceContext:
    """
    Request-scoped data a service attaches to its log records.

    :param request_id: Correlation id of the HTTP request, if any.
    :param client_uid: Public identifier of the authenticated client.
    """

    request_id: str | None = None
    client_uid: str | None = None

    def log_extra(self, **fields: Any) -> dict[str, Any]:
        """``extra=`` mapping for ``logging``; ``fields`` win over context values."""
        extra: dict[str, Any] = {}
        if self.client_uid is not None:
            extra["client_uid"] = self.client_uid
        extra.update(fields)
        return extra


class BaseService:
    """
    Base class for the token engine's façades.

    Services orchestrate codec, registry and grant objects; they never
    render HTTP responses. :meth:`translate_exceptions` gives callers that
    live outside a Flask error handler the same RFC 6749 mapping.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        self.ctx = ctx or ServiceContext()

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map a domain error onto an ``OAuthError``.

        :param exc: Exception raised by the service.
        :returns: The ``OAuthError`` to raise instead, or ``exc`` itself when
            it has no protocol meaning.
        """
        from stateless_oauth.core.errors import from_service_error

        return from_service_error(exc)
