"""Git subprocess wrapper — refs, commit log, diffs, working-tree status, blobs."""

from __future__ import annotations

import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

from gitsweep.git.models import CommitInfo, StatusEntry

# Object id of the empty tree; diffing a root commit against it shows every file as added.
EMPTY_TREE = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%P", "%an", "%ae", "%at", "%B"]) + _RECORD_SEP


class RepositoryAccessError(Exception):
    """Raised when git is unavailable or the repository cannot be read."""


def _run_git(args: list[str], cwd: Path, timeout: int = 120, *, lenient: bool = False) -> str:
    """Run a git command and return stdout. Raises RepositoryAccessError on failure.

    With *lenient*, a non-zero exit that git does not report as fatal (the
    "not found" answer of `rev-parse --verify -q`) returns stdout instead.
    """
    if not cwd.is_dir():
        raise RepositoryAccessError(f"repository path does not exist: {cwd}")
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        raise RepositoryAccessError("git is not installed or not on PATH")
    except NotADirectoryError:
        raise RepositoryAccessError(f"not a directory: {cwd}")
    except subprocess.TimeoutExpired:
        raise RepositoryAccessError(f"git command timed out after {timeout}s: git {' '.join(args)}")

    if result.returncode != 0:
        stderr = result.stderr.strip()
        if lenient and "fatal" not in stderr.lower():
            return result.stdout
        raise RepositoryAccessError(f"git error: {stderr or f'exit status {result.returncode}'}")
    return result.stdout


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the git repository containing *cwd*."""
    cwd = cwd or Path.cwd()
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    if not out.strip():
        raise RepositoryAccessError(f"not a git repository: {cwd}")
    return Path(out.strip())


def repo_name(repo_root: Path) -> str:
    return repo_root.resolve().name


def has_head(repo_root: Path) -> bool:
    """Return True once the repository has at least one commit."""
    out = _run_git(["rev-parse", "--verify", "-q", "HEAD"], cwd=repo_root, lenient=True)
    return bool(out.strip())


def rev_parse(repo_root: Path, rev: str) -> str:
    """Resolve *rev* to a full commit hash."""
    out = _run_git(
        ["rev-parse", "--verify", "-q", f"{rev}^{{commit}}"], cwd=repo_root, lenient=True
    )
    if not out.strip():
        raise RepositoryAccessError(f"could not resolve revision {rev}")
    return out.strip()


def resolve_branch(repo_root: Path, branch: str) -> str:
    """Return the commit a branch points at, checking local heads before origin.

    Tags are never considered. Raises RepositoryAccessError if not found.
    """
    out = _run_git(
        ["for-each-ref", "--format=%(objectname) %(refname)", "refs/heads", "refs/remotes"],
        cwd=repo_root,
    )
    refs = {}
    for line in out.splitlines():
        sha, _, name = line.partition(" ")
        refs[name] = sha
    for name in (f"refs/heads/{branch}", f"refs/remotes/origin/{branch}"):
        if name in refs:
            return refs[name]
    raise RepositoryAccessError(f"could not find branch {branch}")


def _parse_log(output: str) -> List[CommitInfo]:
    commits: List[CommitInfo] = []
    for record in output.split(_RECORD_SEP):
        record = record.lstrip("\n")
        if not record:
            continue
        sha, parents, name, email, stamp, message = record.split(_FIELD_SEP, 5)
        commits.append(
            CommitInfo(
                hash=sha,
                message=message.strip(),
                author=name,
                email=email,
                date=datetime.fromtimestamp(int(stamp or 0), tz=timezone.utc),
                parents=tuple(parents.split()),
            )
        )
    return commits


def list_commits(
    repo_root: Path,
    revisions: Sequence[str],
    *,
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
    no_walk: bool = False,
) -> List[CommitInfo]:
    """Return commits reachable from *revisions*, newest first.

    With *no_walk* only the named commits themselves are returned.
    """
    args = ["log", f"--format={_LOG_FORMAT}"]
    if no_walk:
        args.append("--no-walk=unsorted")
    if since is not None:
        args.append(f"--since={since.isoformat()}")
    if until is not None:
        args.append(f"--until={until.isoformat()}")
    args.extend(revisions)
    args.append("--")
    return _parse_log(_run_git(args, cwd=repo_root))


def get_commit_diff(repo_root: Path, parent: str, commit: str) -> str:
    """Return the unified diff between *parent* and *commit*."""
    return _run_git(
        ["-c", "core.quotepath=off", "diff", "--no-color", "--no-ext-diff", "--unified=0",
         parent, commit, "--"],
        cwd=repo_root,
    )


def get_status(repo_root: Path) -> List[StatusEntry]:
    """Return the working-tree status, untracked files included."""
    out = _run_git(
        ["status", "--porcelain=v1", "-z", "--untracked-files=all"],
        cwd=repo_root,
    )
    entries: List[StatusEntry] = []
    parts = out.split("\0")
    idx = 0
    while idx < len(parts):
        raw = parts[idx]
        idx += 1
        if len(raw) < 4:
            continue
        staging, worktree, path = raw[0], raw[1], raw[3:]
        orig_path = None
        # Renames and copies are followed by the source path
        if staging in "RC" and idx < len(parts):
            orig_path = parts[idx]
            idx += 1
        entries.append(StatusEntry(path=path, staging=staging, worktree=worktree, orig_path=orig_path))
    return entries


def get_head_file(repo_root: Path, path: str) -> Optional[str]:
    """Return *path* as committed at HEAD, or None if HEAD has no such file."""
    listed = _run_git(["ls-tree", "--name-only", "HEAD", "--", path], cwd=repo_root)
    if not listed.strip():
        return None
    return _run_git(["cat-file", "blob", f"HEAD:{path}"], cwd=repo_root)
