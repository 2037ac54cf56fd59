"""Leak data model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

NO_LINE_NUMBER = -1


@dataclass(frozen=True)
class Leak:
    """One detected occurrence of a rule match. Immutable once produced."""

    line_number: int
    line: str
    offender: str
    commit: str
    repo: str
    message: str
    rule: str  # rule description
    rule_id: str
    author: str
    email: str
    date: datetime
    tags: str  # comma-joined rule tags
    file: str

    @property
    def is_file_match(self) -> bool:
        return self.line_number == NO_LINE_NUMBER
