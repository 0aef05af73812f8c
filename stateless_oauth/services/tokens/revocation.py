"""Revocation registry: an append-only denylist of token strings."""

from __future__ import annotations

import logging
import re
from typing import Final

from stateless_oauth.services._shared.errors import ValidationError
from stateless_oauth.services._shared.ports.revocation_store import RevocationStore

log = logging.getLogger(__name__)

# header.payload.signature, URL-safe base64 segments (signature may be empty)
TOKEN_SHAPE: Final[re.Pattern[str]] = re.compile(
    r"\A[a-zA-Z0-9\-_]+?\.[a-zA-Z0-9\-_]+?\.([a-zA-Z0-9\-_]+)?\Z"
)


def ensure_token_shape(token: object) -> str:
    """
    Return ``token`` if it looks like a signed token string.

    :raises ValidationError: For empty input or anything that is not three
        dot-separated URL-safe segments.
    """
    if not isinstance(token, str) or not token:
        raise ValidationError("Token value is required.")
    if not TOKEN_SHAPE.match(token):
        raise ValidationError("Token value is not a signed token.")
    return token


class RevocationRegistry:
    """
    Denylist façade over a :class:`RevocationStore`.

    A recorded token must be rejected by every verification path, whatever
    its signature or expiry. Lookups are open-world: ``is_revoked`` returning
    ``False`` only means the token is not *known* to be revoked.
    """

    def __init__(self, store: RevocationStore) -> None:
        self.store = store

    def record(self, token: str) -> bool:
        """
        Denylist ``token``.

        :returns: ``True`` when this call created the record, ``False`` when it
            already existed. Either way the token is revoked afterwards.
        :raises ValidationError: If ``token`` is not shaped like a signed token.
        """
        value = ensure_token_shape(token)
        inserted = self.store.insert_if_absent(value)
        if not inserted:
            log.debug("Token already present in revocation registry")
        return inserted

    def is_revoked(self, token: str | None) -> bool:
        if not token:
            return False
        return self.store.contains(token)


__all__ = ["RevocationRegistry", "TOKEN_SHAPE", "ensure_token_shape"]
