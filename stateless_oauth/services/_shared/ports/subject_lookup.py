from __future__ import annotations

from typing import Protocol


class SubjectLookup(Protocol):
    """Resolve an external subject reference (an e-mail) to a stable subject id."""

    def subject_id_for(self, reference: str) -> str | None: ...


class InMemorySubjectLookup(SubjectLookup):
    """Dictionary-backed lookup used in unit tests."""

    def __init__(self, subjects: dict[str, str | int] | None = None) -> None:
        self._subjects = {k.strip().lower(): str(v) for k, v in (subjects or {}).items()}

    def subject_id_for(self, reference: str) -> str | None:
        return self._subjects.get(reference.strip().lower())
