"""
stateless_oauth.services._shared.ports
======================================

*Ports* (hexagonal interfaces) for the collaborators the token engine
depends on but does not own.

Modules
-------
- :mod:`token_generator`:
    Defines :class:`~.TokenGenerator` -- mints a signed token string.

- :mod:`revocation_store`:
    Defines :class:`~.RevocationStore` -- atomic insert-if-absent denylist storage.

- :mod:`application_lookup`:
    Defines :class:`~.ApplicationLookup` -- client lookup by uid and secret.

- :mod:`subject_lookup`:
    Defines :class:`~.SubjectLookup` -- resolves an e-mail to a subject id.

Concrete adapters (Redis, SQLAlchemy, Flask-JWT-Extended) live under
``stateless_oauth.infra``; the in-memory doubles here back the unit tests.
"""

from __future__ import annotations

from .application_lookup import (
    ApplicationLookup,
    ClientRecord,
    InMemoryApplicationLookup,
    StaticClient,
)
from .revocation_store import InMemoryRevocationStore, RevocationStore
from .subject_lookup import InMemorySubjectLookup, SubjectLookup
from .token_generator import TokenGenerator

__all__ = [
    "ApplicationLookup",
    "ClientRecord",
    "InMemoryApplicationLookup",
    "StaticClient",
    "RevocationStore",
    "InMemoryRevocationStore",
    "SubjectLookup",
    "InMemorySubjectLookup",
    "TokenGenerator",
]
