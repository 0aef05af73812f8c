"""SQLAlchemy-backed client and subject lookups."""

from __future__ import annotations

from collections.abc import Callable

from stateless_oauth.models.application import Application
from stateless_oauth.services._shared.ports.application_lookup import ApplicationLookup
from stateless_oauth.services._shared.ports.subject_lookup import SubjectLookup
from stateless_oauth.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


class SQLAlchemyApplicationLookup(ApplicationLookup):
    """Find a client by uid and verify its hashed secret."""

    def __init__(self, uow_factory: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork) -> None:
        self.uow_factory = uow_factory

    def find_by_identifier_and_secret(self, uid: str, secret: str) -> Application | None:
        return self.uow_factory().applications.authenticate(uid, secret)


class SQLAlchemySubjectLookup(SubjectLookup):
    """Resolve a subject e-mail to the user's id."""

    def __init__(self, uow_factory: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork) -> None:
        self.uow_factory = uow_factory

    def subject_id_for(self, reference: str) -> str | None:
        if not reference:
            return None
        user = self.uow_factory().users.get_by_email(reference)
        return str(user.id) if user is not None else None
