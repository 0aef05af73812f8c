"""Resource owner (token subject) model."""

from __future__ import annotations

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from stateless_oauth.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


def normalize_email(value: str) -> str:
    """Canonical form used both for storage and for lookups."""
    return value.strip().lower()


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Subject of issued tokens.

    Tokens carry ``str(user.id)`` as ``sub``. Tokens minted by other systems
    may name their owner by e-mail instead; those are resolved to ``id``
    through this table.

    Fields
    ------
    email : str
        Unique, stored normalized (see :func:`normalize_email`).
    """

    __tablename__ = "users"
    __repr_fields__ = ("email",)

    email: Mapped[str] = mapped_column(String(254), nullable=False)

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        Index("ix_users_email", "email"),
    )

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        :raises ValueError: If the address is missing or has no ``@domain.tld`` part.
        """
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Email is required.")
        email = normalize_email(value)
        local, _, domain = email.partition("@")
        if not local or "." not in domain:
            raise ValueError("Email format looks invalid.")
        return email
