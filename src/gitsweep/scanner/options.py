"""Options controlling which commits a scan walks and how it is bounded."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

logger = logging.getLogger(__name__)

TIME_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
DATE_FORMAT = "%Y-%m-%d"


class ScanError(Exception):
    """Raised when scan options are invalid."""


def parse_commit_time(value: str) -> datetime:
    """Parse a full timestamp (``2006-01-02T15:04:05-0700``) or a bare date."""
    for fmt in (TIME_FORMAT, DATE_FORMAT):
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    raise ScanError(f"could not parse {value!r} as a timestamp or a date")


def read_commits_file(path: str) -> List[str]:
    """Read commit hashes from *path*, one per line; blank lines are ignored."""
    try:
        with open(path, encoding="utf-8") as fh:
            return [line.strip() for line in fh if line.strip()]
    except OSError as exc:
        raise ScanError(f"could not read commits file {path}: {exc}") from exc


def how_many_threads(threads: Optional[int]) -> int:
    """Return the worker count: 1 when unset, never more than the CPU count."""
    max_threads = os.cpu_count() or 1
    if not threads:
        return 1
    if threads > max_threads:
        logger.warning("%d threads set too high, setting to system max, %d", threads, max_threads)
        return max_threads
    return threads


@dataclass
class ScanOptions:
    branch: Optional[str] = None
    commit_from: Optional[str] = None
    commit_since: Optional[str] = None
    commit_until: Optional[str] = None
    commits: List[str] = field(default_factory=list)  # explicit commits; "latest" is HEAD
    commits_file: Optional[str] = None  # one commit per line, used when commits is empty
    depth: int = 0  # 0 = unbounded
    timeout: Optional[float] = None  # seconds
    threads: int = 0  # 0 = serial
    repo_name: Optional[str] = None

    @property
    def since(self) -> Optional[datetime]:
        return parse_commit_time(self.commit_since) if self.commit_since else None

    @property
    def until(self) -> Optional[datetime]:
        return parse_commit_time(self.commit_until) if self.commit_until else None

    def explicit_commits(self) -> List[str]:
        """Return the commits to scan directly, from the list or else the commits file."""
        if self.commits:
            return list(self.commits)
        if self.commits_file:
            return read_commits_file(self.commits_file)
        return []

    @property
    def has_explicit_commits(self) -> bool:
        return bool(self.commits or self.commits_file)

    @property
    def has_range(self) -> bool:
        return bool(self.commit_from or self.commit_since or self.commit_until)

    def depth_reached(self, count: int) -> bool:
        """Return True once *count* commits have been dispatched and a depth is set."""
        if self.depth and count >= self.depth:
            logger.warning("Exceeded depth limit (%d)", self.depth)
            return True
        return False


def _env_int(name: str) -> Optional[int]:
    val = os.environ.get(name)
    if not val:
        return None
    try:
        return int(val)
    except ValueError:
        return None


def apply_env_overrides(options: ScanOptions) -> None:
    """Apply GITSWEEP_* environment variable overrides."""
    if (val := _env_int("GITSWEEP_THREADS")) is not None:
        options.threads = val
    if (val := _env_int("GITSWEEP_DEPTH")) is not None:
        options.depth = val
    if (val := _env_int("GITSWEEP_TIMEOUT")) is not None:
        options.timeout = float(val)
