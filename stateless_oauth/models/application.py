"""OAuth client application (the *client record* of the token engine)."""

from __future__ import annotations

import secrets
from typing import Any

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates
from werkzeug.security import check_password_hash, generate_password_hash

from stateless_oauth.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


def generate_uid() -> str:
    """Random public client identifier."""
    return secrets.token_urlsafe(32)


class Application(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Registered OAuth client.

    Fields
    ------
    name : str
        Display name.
    uid : str
        Public client identifier, bound into every token issued to the client.
    secret_hash : str
        Hashed client secret (write-only setter via ``secret``).
    scopes : str
        Space-delimited scopes the client may request; empty means "no
        restriction beyond the server's".
    """

    __tablename__ = "oauth_applications"
    __repr_fields__ = ("uid", "name")

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    uid: Mapped[str] = mapped_column(String(64), nullable=False, default=generate_uid)
    secret_hash: Mapped[str] = mapped_column(String(254), nullable=False)
    scopes: Mapped[str] = mapped_column(String(1000), nullable=False, default="")

    __table_args__ = (
        UniqueConstraint("uid", name="uq_oauth_applications_uid"),
        Index("ix_oauth_applications_uid", "uid"),
    )

    # -------------------- Secret API --------------------
    @property
    def secret(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading secrets.

        :raises AttributeError: Always, the secret is write-only.
        """
        raise AttributeError("Client secret is write-only.")

    @secret.setter
    def secret(self, raw: str) -> None:
        if not isinstance(raw, str) or not raw:
            raise ValueError("Client secret must be a non-empty string.")
        self.secret_hash = generate_password_hash(raw)

    def verify_secret(self, raw: str | None) -> bool:
        """
        Verify a secret against the stored hash.

        :param raw: Plain text secret candidate.
        :returns: ``True`` if it matches; otherwise ``False``.
        """
        if not self.secret_hash or not raw:
            return False
        return bool(check_password_hash(self.secret_hash, raw))

    # -------------------- Validators --------------------
    @validates("scopes")
    def _normalize_scopes(self, key: str, value: str | None) -> str:
        """Collapse repeated spaces so the column always holds a canonical scope string."""
        return " ".join(dict.fromkeys(s for s in (value or "").split(" ") if s))

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Application name is required.")
        return value.strip()
