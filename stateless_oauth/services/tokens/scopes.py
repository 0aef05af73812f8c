"""Scope sets and the checks that compare them.

A scope set is parsed from a space-delimited string; membership is exact
string equality per scope name.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

# any whitespace except the plain space delimiter
_FORBIDDEN = re.compile(r"[^\S ]")


class Scopes:
    """Ordered, duplicate-free collection of scope names."""

    __slots__ = ("_scopes",)

    def __init__(self, scopes: Iterable[str] | None = None) -> None:
        self._scopes: list[str] = []
        for scope in scopes or ():
            self.add(scope)

    @classmethod
    def from_string(cls, value: str | None) -> Scopes:
        """Parse a string delimited by U+0020 only. ``None`` and ``""`` give an empty set."""
        return cls(s for s in (value or "").split(" ") if s)

    @classmethod
    def from_iterable(cls, values: Iterable[str] | None) -> Scopes:
        return cls(str(v) for v in values or ())

    @classmethod
    def coerce(cls, value: Scopes | str | Iterable[str] | None) -> Scopes:
        """Accept a :class:`Scopes`, a space-delimited string or an iterable of names."""
        if isinstance(value, Scopes):
            return value
        if value is None or isinstance(value, str):
            return cls.from_string(value)
        return cls.from_iterable(value)

    def add(self, *scopes: str) -> None:
        for scope in scopes:
            name = str(scope)
            if name and name not in self._scopes:
                self._scopes.append(name)

    def exists(self, scope: str) -> bool:
        return str(scope) in self._scopes

    def has_scopes(self, other: Scopes | Iterable[str]) -> bool:
        """``True`` when every scope of ``other`` is present here (subset test)."""
        return all(self.exists(s) for s in other)

    def includes(self, *wanted: str) -> bool:
        """``True`` when nothing is wanted or at least one wanted scope is present."""
        if not wanted:
            return True
        return any(self.exists(s) for s in wanted)

    def all(self) -> list[str]:
        return list(self._scopes)

    def __and__(self, other: Scopes) -> Scopes:
        return Scopes(s for s in self._scopes if other.exists(s))

    def __add__(self, other: Scopes) -> Scopes:
        return Scopes([*self._scopes, *other])

    def __iter__(self) -> Iterator[str]:
        return iter(self._scopes)

    def __len__(self) -> int:
        return len(self._scopes)

    def __bool__(self) -> bool:
        return bool(self._scopes)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Scopes):
            return set(self._scopes) == set(other._scopes)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._scopes))

    def __str__(self) -> str:
        return " ".join(self._scopes)

    def __repr__(self) -> str:
        return f"Scopes({str(self)!r})"


class ScopeChecker:
    """Stateless validations of a requested scope string."""

    @staticmethod
    def valid(
        scope_str: str | None,
        server_scopes: Scopes | str | Iterable[str] | None,
        app_scopes: Scopes | str | Iterable[str] | None = None,
    ) -> bool:
        """Requested scopes are present, well-formed and allowed.

        A request is allowed when it is a subset of ``server_scopes`` and, if
        ``app_scopes`` is non-empty, also a subset of ``app_scopes``.
        """
        if not scope_str or not scope_str.strip() or _FORBIDDEN.search(scope_str):
            return False
        requested = Scopes.from_string(scope_str)
        if not Scopes.coerce(server_scopes).has_scopes(requested):
            return False
        allowed_by_app = Scopes.coerce(app_scopes)
        return not allowed_by_app or allowed_by_app.has_scopes(requested)


def scopes_match(
    token_scopes: Scopes | str | Iterable[str] | None,
    requested_scopes: Scopes | str | Iterable[str] | None,
    app_scopes: Scopes | str | Iterable[str] | None = None,
) -> bool:
    """Check requested scopes against a token's grant and the application's allowance.

    True when nothing is requested; otherwise every requested scope must be
    granted by the token and, when the application restricts scopes, allowed
    by the application too.
    """
    requested = Scopes.coerce(requested_scopes)
    if not requested:
        return True
    return ScopeChecker.valid(str(requested), Scopes.coerce(token_scopes), app_scopes)


__all__ = ["Scopes", "ScopeChecker", "scopes_match"]
