"""Application (OAuth client) repository."""

from __future__ import annotations

from stateless_oauth.models.application import Application
from stateless_oauth.repositories.base import BaseRepository


class ApplicationRepository(BaseRepository[Application]):
    """Client records, looked up by their public ``uid``."""

    model = Application

    def get_by_uid(self, uid: str) -> Application | None:
        """Exact, case-sensitive ``uid`` match."""
        if not uid:
            return None
        return self.first_by(uid=uid)

    def authenticate(self, uid: str, secret: str) -> Application | None:
        """
        Client-credentials check used by the refresh grant.

        :returns: The client when ``uid`` exists and ``secret`` matches its
            stored hash, else ``None`` (unknown uid and wrong secret are
            indistinguishable to the caller).
        """
        client = self.get_by_uid(uid)
        if client is None or not client.verify_secret(secret):
            return None
        return client
