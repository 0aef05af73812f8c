"""Relational revocation store over ``oauth_revoked_tokens``."""

from __future__ import annotations

from collections.abc import Callable

from stateless_oauth.services._shared.ports.revocation_store import RevocationStore
from stateless_oauth.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


class SQLAlchemyRevocationStore(RevocationStore):
    """
    Revocation store backed by the UNIQUE ``token`` column.

    Every insert runs in its own unit of work so the record is durable
    before the caller issues anything new.

    .. note::
       Requires an active Flask app context (Flask-scoped session).
    """

    def __init__(self, uow_factory: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork) -> None:
        self.uow_factory = uow_factory

    def insert_if_absent(self, token: str) -> bool:
        with self.uow_factory() as uow:
            return uow.revoked_tokens.insert_if_absent(token)

    def contains(self, token: str) -> bool:
        uow = self.uow_factory()
        return uow.revoked_tokens.exists(token)
