from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta
from typing import Protocol


class TokenGenerator(Protocol):
    """Port for minting a signed token string from grant attributes."""

    def generate(
        self,
        *,
        subject_id: str | int,
        scopes: Iterable[str],
        client_uid: str | None,
        kind: str,
        issued_at: datetime,
        lifetime: timedelta,
    ) -> str: ...
