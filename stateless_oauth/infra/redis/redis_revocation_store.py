from __future__ import annotations

import hashlib

import redis  # type: ignore[import-untyped]

from stateless_oauth.services._shared.ports.revocation_store import RevocationStore


class RedisRevocationStore(RevocationStore):
    """
    Denylist of token strings in Redis.

    ``SET key 1 NX`` is the atomic insert-if-absent. Keys have no TTL;
    pruning entries of expired tokens is left to operators.

    :param r: A Redis client (already connected).
    """

    def __init__(self, r: redis.Redis, *, prefix: str = "revoked:rt:") -> None:
        self.r = r
        self.prefix = prefix

    def _k(self, token: str) -> str:
        # Hash keeps keys short and avoids storing bearer credentials verbatim.
        return self.prefix + hashlib.sha256(token.encode("utf-8")).hexdigest()

    def insert_if_absent(self, token: str) -> bool:
        return bool(self.r.set(self._k(token), "1", nx=True))

    def contains(self, token: str) -> bool:
        return int(self.r.exists(self._k(token))) == 1
