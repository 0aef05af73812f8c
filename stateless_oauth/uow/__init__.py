from stateless_oauth.uow.base import UnitOfWork
from stateless_oauth.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

__all__ = ["UnitOfWork", "SQLAlchemyUnitOfWork"]
