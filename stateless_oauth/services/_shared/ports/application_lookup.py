from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import Protocol


class ClientRecord(Protocol):
    """Minimal view of an OAuth client application."""

    @property
    def id(self) -> int | str: ...

    @property
    def uid(self) -> str: ...


class ApplicationLookup(Protocol):
    """Find a client application by its public identifier and secret."""

    def find_by_identifier_and_secret(self, uid: str, secret: str) -> ClientRecord | None: ...


@dataclass(frozen=True, slots=True)
class StaticClient:
    """Plain client record for tests and configuration-defined clients."""

    id: int | str
    uid: str
    secret: str
    scopes: str = ""


class InMemoryApplicationLookup(ApplicationLookup):
    """Lookup over a fixed set of :class:`StaticClient` records."""

    def __init__(self, *clients: StaticClient) -> None:
        self._by_uid = {c.uid: c for c in clients}

    def find_by_identifier_and_secret(self, uid: str, secret: str) -> StaticClient | None:
        client = self._by_uid.get(uid)
        if client is None or not hmac.compare_digest(client.secret, secret or ""):
            return None
        return client
