"""Git interface layer — adapter, diff parsing, models."""

from gitsweep.git.adapter import (
    EMPTY_TREE,
    RepositoryAccessError,
    get_commit_diff,
    get_head_file,
    get_repo_root,
    get_status,
    has_head,
    list_commits,
    resolve_branch,
)
from gitsweep.git.diff_parser import DiffParser, added_content
from gitsweep.git.models import (
    CommitInfo,
    DiffFile,
    DiffLine,
    FileSkipped,
    StatusEntry,
)

__all__ = [
    "EMPTY_TREE",
    "CommitInfo",
    "DiffFile",
    "DiffLine",
    "DiffParser",
    "FileSkipped",
    "RepositoryAccessError",
    "StatusEntry",
    "added_content",
    "get_commit_diff",
    "get_head_file",
    "get_repo_root",
    "get_status",
    "has_head",
    "list_commits",
    "resolve_branch",
]
