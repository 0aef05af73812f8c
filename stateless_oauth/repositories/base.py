"""Repository base for the OAuth tables (SQLAlchemy 2.x).

Repositories only read and stage rows. Transactions belong to the Unit of
Work: nothing here commits or rolls back.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar, cast

from sqlalchemy import select
from sqlalchemy.orm import Session

from stateless_oauth.core.extensions import db

E = TypeVar("E")  # mapped model


class BaseRepository(Generic[E]):
    """Typed access to one mapped model.

    Subclasses set ``model``.

    :param session: Session of the enclosing Unit of Work. Falls back to the
        Flask-scoped ``db.session``.
    """

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        return self._session if self._session is not None else cast(Session, db.session)

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so its primary key is assigned."""
        self.session.add(instance)
        self.session.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        return self.session.get(self.model, entity_id)

    def first_by(self, **filters: Any) -> E | None:
        """First row whose columns equal ``filters`` (exact match), or ``None``."""
        stmt = select(self.model).filter_by(**filters).limit(1)
        return self.session.execute(stmt).scalars().first()
