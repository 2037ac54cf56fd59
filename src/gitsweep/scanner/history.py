"""History scanner — walk commits and scan what each one added."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from pathlib import Path
from typing import List, Optional

from gitsweep.config.schema import Config
from gitsweep.findings.models import Leak
from gitsweep.git.adapter import (
    EMPTY_TREE,
    RepositoryAccessError,
    get_commit_diff,
    list_commits,
    repo_name,
    resolve_branch,
    rev_parse,
)
from gitsweep.git.diff_parser import added_content
from gitsweep.git.models import CommitInfo
from gitsweep.scanner.detector import detect
from gitsweep.scanner.options import ScanOptions, how_many_threads
from gitsweep.scanner.pool import Deadline, run_pool

logger = logging.getLogger(__name__)


@dataclass
class LogPlan:
    """Arguments for the commit walk, derived from ScanOptions."""

    revisions: List[str] = field(default_factory=lambda: ["--all"])
    since: Optional[datetime] = None
    until: Optional[datetime] = None
    no_walk: bool = False


def log_plan(repo_root: Path, options: ScanOptions) -> LogPlan:
    """Decide which commits to walk, similar to ``git log <revs>``.

    Explicit commits win, then a branch, then a from/since/until range;
    by default every ref is walked so the full history is covered.
    """
    if options.has_explicit_commits:
        shas = [
            rev_parse(repo_root, "HEAD" if c == "latest" else c)
            for c in options.explicit_commits()
        ]
        return LogPlan(revisions=shas, no_walk=True)
    if options.branch:
        # a branch resets any range options
        return LogPlan(revisions=[resolve_branch(repo_root, options.branch)])
    if options.has_range:
        start = rev_parse(repo_root, options.commit_from) if options.commit_from else "HEAD"
        return LogPlan(revisions=[start], since=options.since, until=options.until)
    return LogPlan()


def scan_commit(repo_root: Path, config: Config, name: str, commit: CommitInfo) -> List[Leak]:
    """Scan the content *commit* added relative to each of its parents.

    A root commit is compared with the empty tree. A commit whose diff cannot
    be produced or parsed is logged and skipped.
    """
    if config.allowlist.commit_allowed(commit.hash):
        logger.debug("skipping allowlisted commit %s", commit.hash)
        return []

    leaks: List[Leak] = []
    for parent in commit.parents or (EMPTY_TREE,):
        try:
            files = added_content(get_commit_diff(repo_root, parent, commit.hash))
        except (RepositoryAccessError, ValueError) as exc:
            logger.warning("skipping commit %s: %s", commit.hash[:12], exc)
            return []
        for file_path, content in files.items():
            leaks.extend(detect(config, name, file_path, commit, content))
    return leaks


def scan_history(
    repo_root: Path,
    config: Config,
    options: Optional[ScanOptions] = None,
) -> List[Leak]:
    """Scan the repository's commit history and return every leak found.

    Hitting the depth limit or the time budget ends the walk early with a
    warning; the leaks found up to then are returned.
    """
    options = options or ScanOptions()
    deadline = Deadline(options.timeout)
    name = options.repo_name or repo_name(repo_root)
    plan = log_plan(repo_root, options)
    commits: List[CommitInfo] = []
    if plan.revisions:
        commits = list_commits(
            repo_root,
            plan.revisions,
            since=plan.since,
            until=plan.until,
            no_walk=plan.no_walk,
        )
    threads = how_many_threads(options.threads)
    logger.info("scanning %d commits in %s with %d thread(s)", len(commits), name, threads)

    leaks = run_pool(
        commits,
        partial(scan_commit, repo_root, config, name),
        threads=threads,
        deadline=deadline,
        should_stop=options.depth_reached,
    )
    logger.info("found %d leaks in %s", len(leaks), name)
    return leaks
