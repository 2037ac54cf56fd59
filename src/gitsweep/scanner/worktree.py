"""Working-tree scanner — find secrets in changes that are not committed yet.

Without a HEAD commit every changed file is scanned whole. Otherwise each
changed file is compared with its HEAD version and only the inserted text is
scanned, so secrets that were already committed are not reported again.
"""

from __future__ import annotations

import logging
from functools import partial
from pathlib import Path
from typing import List, Optional

from diff_match_patch import diff_match_patch

from gitsweep.config.schema import Config
from gitsweep.findings.models import Leak
from gitsweep.git.adapter import (
    RepositoryAccessError,
    get_head_file,
    get_status,
    has_head,
    repo_name,
)
from gitsweep.git.models import CommitInfo, StatusEntry
from gitsweep.scanner.detector import detect
from gitsweep.scanner.options import ScanOptions, how_many_threads
from gitsweep.scanner.pool import Deadline, run_pool

logger = logging.getLogger(__name__)


def inserted_content(previous: str, current: str) -> str:
    """Return the spans inserted between *previous* and *current*, one per line."""
    dmp = diff_match_patch()
    diffs = dmp.diff_main(previous, current, False)
    dmp.diff_cleanupSemantic(diffs)
    return "".join(f"{text}\n" for op, text in diffs if op == dmp.DIFF_INSERT)


def _read_worktree_file(repo_root: Path, path: str) -> Optional[str]:
    try:
        return (repo_root / path).read_bytes().decode("utf-8", errors="replace")
    except OSError as exc:
        logger.warning("unable to open %s, skipping: %s", path, exc)
        return None


def scan_entry(
    repo_root: Path,
    config: Config,
    name: str,
    head_exists: bool,
    entry: StatusEntry,
) -> List[Leak]:
    """Scan one changed path under the staged-changes placeholder commit."""
    commit = CommitInfo.staged()

    if not head_exists or entry.is_untracked:
        content = _read_worktree_file(repo_root, entry.path)
        if content is None:
            return []
        return detect(config, name, entry.path, commit, content)

    if entry.is_deleted:
        current = ""
    else:
        current = _read_worktree_file(repo_root, entry.path)
        if current is None:
            return []

    try:
        previous = get_head_file(repo_root, entry.orig_path or entry.path) or ""
    except RepositoryAccessError as exc:
        logger.warning("unable to read %s at HEAD, skipping: %s", entry.path, exc)
        return []

    return detect(config, name, entry.path, commit, inserted_content(previous, current))


def scan_working_tree(
    repo_root: Path,
    config: Config,
    options: Optional[ScanOptions] = None,
) -> List[Leak]:
    """Scan staged and unstaged changes in the working tree.

    Raises RepositoryAccessError when the status cannot be read.
    """
    options = options or ScanOptions()
    deadline = Deadline(options.timeout)
    name = options.repo_name or repo_name(repo_root)
    head_exists = has_head(repo_root)
    entries = get_status(repo_root)
    logger.info(
        "scanning %d uncommitted path(s) in %s%s",
        len(entries),
        name,
        "" if head_exists else " (no HEAD yet)",
    )
    return run_pool(
        entries,
        partial(scan_entry, repo_root, config, name, head_exists),
        threads=how_many_threads(options.threads),
        deadline=deadline,
    )
