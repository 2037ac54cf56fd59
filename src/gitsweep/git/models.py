"""Data models for commits, working-tree status and diff parsing."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple

STAGED_CHANGES_MESSAGE = "***STAGED CHANGES***"
EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


@dataclass(frozen=True)
class CommitInfo:
    """Commit metadata carried onto every leak found in that commit."""

    hash: str
    message: str = ""
    author: str = ""
    email: str = ""
    date: datetime = EPOCH
    parents: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def staged(cls) -> "CommitInfo":
        """Placeholder metadata for changes that are not committed yet."""
        return cls(hash="", message=STAGED_CHANGES_MESSAGE)


@dataclass(frozen=True)
class StatusEntry:
    """One path from ``git status --porcelain``.

    ``staging`` and ``worktree`` are the X and Y status letters.
    """

    path: str
    staging: str
    worktree: str
    orig_path: Optional[str] = None

    @property
    def is_untracked(self) -> bool:
        return self.staging == "?" and self.worktree == "?"

    @property
    def is_deleted(self) -> bool:
        return "D" in (self.staging, self.worktree)


@dataclass(frozen=True, slots=True)
class DiffLine:
    """An added line from a unified diff."""

    file: str
    content: str


@dataclass(frozen=True)
class DiffFile:
    """Metadata about a file appearing in a diff."""

    path: str
    deleted: bool = False


@dataclass(frozen=True)
class FileSkipped:
    """Record of a file that was skipped during diff parsing."""

    path: str
    reason: str  # 'binary', 'mode_only'
