"""Leak detector — runs a resolved config's rules over one unit of content.

A unit is one file at one point in history: the added lines of a commit's
diff, the inserted spans of an uncommitted change, or a whole untracked file.

Detection has two phases. File rules (a file name or path regex and no
content regex) are matched once per file. Content rules are then matched line
by line. Rules ruled out for the file by the skip policy are never evaluated
for any of its lines.
"""

from __future__ import annotations

import logging
import posixpath
import re
from dataclasses import dataclass
from typing import List, Optional, Protocol, Set

from gitsweep.config.schema import Config
from gitsweep.findings.models import NO_LINE_NUMBER, Leak
from gitsweep.git.models import CommitInfo
from gitsweep.rules.models import Rule
from gitsweep.scanner.entropy import tripped_entropy

logger = logging.getLogger(__name__)

FILE_MATCH_LINE = "N/A"


class MatchTarget(Protocol):
    """Anything a file or path regex can be matched against."""

    def text(self) -> str: ...


@dataclass(frozen=True)
class TextTarget:
    value: str

    def text(self) -> str:
        return self.value


@dataclass(frozen=True)
class FileTarget:
    """A file path whose base name is the text to match."""

    path: str

    def text(self) -> str:
        return posixpath.basename(self.path)


def regex_matched(target: MatchTarget, pattern: Optional[re.Pattern[str]]) -> bool:
    if pattern is None:
        return False
    return pattern.search(target.text()) is not None


def _any_matched(target: MatchTarget, patterns: List[re.Pattern[str]]) -> bool:
    return any(regex_matched(target, p) for p in patterns)


def skip_file(config: Config, file_path: str, commit: CommitInfo) -> bool:
    """Return True if the global allowlist excludes this file entirely."""
    if config.allowlist.commit_allowed(commit.hash):
        logger.debug("allowlisted commit found, skipping %s", commit.hash)
        return True
    if _any_matched(FileTarget(file_path), config.allowlist.files):
        logger.debug("allowlisted file found, skipping scan of file: %s", file_path)
        return True
    if _any_matched(TextTarget(posixpath.dirname(file_path)), config.allowlist.paths):
        logger.debug("file in allowlisted path found, skipping scan of file: %s", file_path)
        return True
    return False


def skip_rule(rule: Rule, file_path: str, commit: CommitInfo) -> bool:
    """Return True if *rule* does not apply to this file at all."""
    if _any_matched(FileTarget(file_path), rule.allowlist.files):
        return True
    if _any_matched(TextTarget(file_path), rule.allowlist.paths):
        return True
    if rule.allowlist.commit_allowed(commit.hash):
        return True
    if rule.has_file_regex and not regex_matched(FileTarget(file_path), rule.file):
        return True
    if rule.has_path_regex and not regex_matched(TextTarget(file_path), rule.path):
        return True
    return False


def _make_leak(
    rule: Rule,
    *,
    repo_name: str,
    file_path: str,
    commit: CommitInfo,
    line_number: int,
    line: str,
    offender: str,
) -> Leak:
    return Leak(
        line_number=line_number,
        line=line,
        offender=offender,
        commit=commit.hash,
        repo=repo_name,
        message=commit.message,
        rule=rule.description,
        rule_id=rule.id,
        author=commit.author,
        email=commit.email,
        date=commit.date,
        tags=", ".join(rule.tags),
        file=file_path,
    )


def _match_line(config: Config, rule: Rule, line: str) -> Optional[str]:
    """Return the offender *rule* reports for *line*, or None."""
    if not rule.keyword_hit(line):
        return None
    assert rule.regex is not None
    m = rule.regex.search(line)
    if m is None:
        return None

    groups = [m.group(0), *(g or "" for g in m.groups())]
    if rule.allowlist.regex_allowed(line) or config.allowlist.regex_allowed(line):
        return None
    if rule.entropies and not tripped_entropy(groups, rule):
        return None

    # group 0 is the whole match
    offender = groups[0]
    if 0 < rule.secret_group < len(groups):
        offender = groups[rule.secret_group]

    if rule.allowlist.has_stopword(offender) or config.allowlist.has_stopword(offender):
        return None
    return offender


def detect(
    config: Config,
    repo_name: str,
    file_path: str,
    commit: CommitInfo,
    content: str,
) -> List[Leak]:
    """Return every leak *config* finds in *content* of *file_path*.

    Leaks are ordered by line, then by rule order in the config; file rule
    matches come first.
    """
    leaks: List[Leak] = []
    if skip_file(config, file_path, commit):
        return leaks

    skipped: Set[str] = set()
    for rule in config.rules.values():
        if skip_rule(rule, file_path, commit):
            skipped.add(rule.id)
            continue
        if rule.is_file_rule:
            leaks.append(
                _make_leak(
                    rule,
                    repo_name=repo_name,
                    file_path=file_path,
                    commit=commit,
                    line_number=NO_LINE_NUMBER,
                    line=FILE_MATCH_LINE,
                    offender=f"Filename/path offender: {posixpath.basename(file_path)}",
                )
            )

    active = [r for r in config.content_rules() if r.id not in skipped]
    if not active:
        return leaks

    for line_number, line in enumerate(content.split("\n")):
        for rule in active:
            offender = _match_line(config, rule, line)
            if offender is None:
                continue
            leaks.append(
                _make_leak(
                    rule,
                    repo_name=repo_name,
                    file_path=file_path,
                    commit=commit,
                    line_number=line_number,
                    line=line,
                    offender=offender,
                )
            )
    return leaks
