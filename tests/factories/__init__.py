"""Factory Boy base bound to the session of the running test."""

from __future__ import annotations

from typing import Any

import factory

_session: Any = None


def bind_session(session: Any) -> None:
    """Point every factory at ``session``; ``None`` unbinds."""
    global _session
    _session = session


def current_session() -> Any:
    """Session factories persist through.

    :raises RuntimeError: If a factory runs outside the ``session`` fixture.
    """
    if _session is None:
        raise RuntimeError("No session bound for factories; request the 'session' fixture.")
    return _session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Rows are committed so repository reads in the same test see them."""

    class Meta:
        abstract = True
        sqlalchemy_session_factory = current_session
        sqlalchemy_session_persistence = "commit"
