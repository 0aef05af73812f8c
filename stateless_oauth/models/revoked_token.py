"""Revocation record: a token string that must be rejected from now on."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, validates

from stateless_oauth.core.extensions import db
from stateless_oauth.services.tokens.revocation import TOKEN_SHAPE

from .base import PKMixin, ReprMixin


class RevokedToken(PKMixin, ReprMixin, db.Model):
    """
    Append-only denylist row.

    Rows are inserted once and never updated or deleted by the engine; the
    UNIQUE constraint on ``token`` is what makes insert-if-absent atomic.
    """

    __tablename__ = "oauth_revoked_tokens"
    __repr_fields__ = ("revoked_at",)

    token: Mapped[str] = mapped_column(String(4096), nullable=False)
    revoked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (UniqueConstraint("token", name="uq_oauth_revoked_tokens_token"),)

    @validates("token")
    def _validate_token(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not TOKEN_SHAPE.match(value):
            raise ValueError("Revoked token must be a signed token string.")
        return value
