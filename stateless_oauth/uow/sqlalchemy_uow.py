"""
SQLAlchemy Unit of Work bound to the Flask-scoped session.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from stateless_oauth.core.extensions import db
from stateless_oauth.repositories import (
    ApplicationRepository,
    RevokedTokenRepository,
    UserRepository,
)
from stateless_oauth.uow.base import UnitOfWork


class SQLAlchemyUnitOfWork(UnitOfWork):
    """
    Repositories sharing one session; the transaction ends with the block.

    :param session: Explicit session, defaults to ``db.session``.

    .. note::
       The session is started lazily by the first statement, so entering the
       block costs nothing for read-only use.
    """

    def __init__(self, session: Session | None = None) -> None:
        self.session = session if session is not None else db.session
        self.applications = ApplicationRepository(session=self.session)
        self.users = UserRepository(session=self.session)
        self.revoked_tokens = RevokedTokenRepository(session=self.session)

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
