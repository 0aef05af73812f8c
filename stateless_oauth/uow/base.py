"""
Unit of Work contract for revocation writes and client/subject reads.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stateless_oauth.repositories import (
        ApplicationRepository,
        RevokedTokenRepository,
        UserRepository,
    )


class UnitOfWork(ABC):
    """
    One transaction around a revocation (or a lookup).

    A revocation record must be durable before a replacement token pair is
    handed out, so leaving the block cleanly commits and any exception rolls
    back. Implementations only provide ``commit``/``rollback`` and the
    repositories.
    """

    applications: ApplicationRepository
    users: UserRepository
    revoked_tokens: RevokedTokenRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
