"""Column mixins for the OAuth tables (typed SQLAlchemy 2.0)."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column


class PKMixin:
    """Integer surrogate key ``id``; the public identifiers live elsewhere (``uid``, ``email``)."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class TimestampMixin:
    """Database-filled ``created_at`` / ``updated_at`` for mutable records.

    Revocation rows are append-only and carry their own ``revoked_at``
    instead of this mixin.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class ReprMixin:
    """``<Model id=.. field=..>`` built from ``__repr_fields__``.

    Models list only non-secret columns there: client secrets and revoked
    token strings must never show up in logs or tracebacks.
    """

    __repr_fields__: ClassVar[tuple[str, ...]] = ()

    def __repr__(self) -> str:
        parts = [f"id={getattr(self, 'id', None)}"]
        parts.extend(f"{name}={getattr(self, name, None)!r}" for name in self.__repr_fields__)
        return f"<{self.__class__.__name__} {' '.join(parts)}>"
