from stateless_oauth.infra.sqlalchemy.lookups import (
    SQLAlchemyApplicationLookup,
    SQLAlchemySubjectLookup,
)
from stateless_oauth.infra.sqlalchemy.revocation_store import SQLAlchemyRevocationStore

__all__ = [
    "SQLAlchemyApplicationLookup",
    "SQLAlchemyRevocationStore",
    "SQLAlchemySubjectLookup",
]
