"""Revocation record repository with an atomic insert-if-absent."""

from __future__ import annotations

import logging

from sqlalchemy import insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError

from stateless_oauth.models.revoked_token import RevokedToken
from stateless_oauth.repositories.base import BaseRepository

log = logging.getLogger(__name__)

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class RevokedTokenRepository(BaseRepository[RevokedToken]):
    """Persistence-only repository for :class:`RevokedToken`.

    ``insert_if_absent`` relies on the UNIQUE constraint on ``token``: among
    concurrent transactions inserting the same value, exactly one inserts a
    row.
    """

    model = RevokedToken

    def insert_if_absent(self, token: str) -> bool:
        """Insert a revocation row unless one already exists.

        :param token: Encoded token string.
        :returns: ``True`` when this call inserted the row.
        """
        dialect = self.session.get_bind().dialect.name
        dialect_insert = _UPSERT_INSERTS.get(dialect)
        if dialect_insert is not None:
            stmt = (
                dialect_insert(RevokedToken)
                .values(token=token)
                .on_conflict_do_nothing(index_elements=[RevokedToken.token])
            )
            result = self.session.execute(stmt)
            return result.rowcount == 1

        # Portable path: let the UNIQUE constraint decide inside a SAVEPOINT.
        try:
            with self.session.begin_nested():
                self.session.execute(insert(RevokedToken).values(token=token))
        except IntegrityError:
            log.debug("Revocation row already present (dialect=%s)", dialect)
            return False
        return True

    def exists(self, token: str) -> bool:
        """Return ``True`` when ``token`` has a revocation row."""
        stmt = select(RevokedToken.id).where(RevokedToken.token == token).limit(1)
        return self.session.execute(stmt).first() is not None
