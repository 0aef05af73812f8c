from __future__ import annotations

import threading
from typing import Protocol


class RevocationStore(Protocol):
    """
    Durable backing for the revocation denylist.

    ``insert_if_absent`` MUST be atomic: among concurrent callers presenting
    the same token exactly one observes ``True``.
    """

    def insert_if_absent(self, token: str) -> bool:
        """Record ``token``. :returns: ``True`` if this call created the record."""

    def contains(self, token: str) -> bool:
        """Return ``True`` if ``token`` has been recorded."""


class InMemoryRevocationStore(RevocationStore):
    """
    Process-local denylist.

    .. note::
       Uses a threading lock to provide the atomic insert-if-absent contract.
    """

    def __init__(self) -> None:
        self._tokens: set[str] = set()
        self._lock = threading.Lock()

    def insert_if_absent(self, token: str) -> bool:
        with self._lock:
            if token in self._tokens:
                return False
            self._tokens.add(token)
            return True

    def contains(self, token: str) -> bool:
        with self._lock:
            return token in self._tokens

    def __len__(self) -> int:
        return len(self._tokens)
