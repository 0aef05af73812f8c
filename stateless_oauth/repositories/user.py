"""User (token subject) repository."""

from __future__ import annotations

from stateless_oauth.models.user import User, normalize_email
from stateless_oauth.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    def get_by_email(self, email: str) -> User | None:
        """Subject for an e-mail, compared in its stored normalized form."""
        if not email or not email.strip():
            return None
        return self.first_by(email=normalize_email(email))
