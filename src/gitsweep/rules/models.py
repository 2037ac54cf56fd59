"""Rule and allowlist data model. Patterns are compiled when a config is resolved."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class EntropyRange:
    """Inclusive Shannon entropy bounds applied to one capture group."""

    min: float
    max: float
    group: int = 0


@dataclass
class Allowlist:
    """Exclusion criteria, used both per rule and for the whole config.

    ``regexes`` are searched in content lines, ``files`` in file base names
    and ``paths`` in file paths. ``commits`` holds exact commit hashes and
    ``stopwords`` literal strings that void an offender containing them.
    """

    description: str = ""
    regexes: List[re.Pattern[str]] = field(default_factory=list)
    files: List[re.Pattern[str]] = field(default_factory=list)
    paths: List[re.Pattern[str]] = field(default_factory=list)
    commits: List[str] = field(default_factory=list)
    stopwords: List[str] = field(default_factory=list)

    def commit_allowed(self, commit: str) -> bool:
        return bool(commit) and commit in self.commits

    def regex_allowed(self, line: str) -> bool:
        return any(p.search(line) for p in self.regexes)

    def has_stopword(self, offender: str) -> bool:
        lowered = offender.lower()
        return any(w.lower() in lowered for w in self.stopwords)


@dataclass
class Rule:
    """A single detection rule.

    A rule matches line content through ``regex``, file names through
    ``file`` and file paths through ``path``. A rule with none of the three
    never produces a leak.
    """

    id: str
    description: str = ""
    regex: Optional[re.Pattern[str]] = None
    secret_group: int = 0
    file: Optional[re.Pattern[str]] = None
    path: Optional[re.Pattern[str]] = None
    keywords: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    entropies: List[EntropyRange] = field(default_factory=list)
    allowlist: Allowlist = field(default_factory=Allowlist)

    @property
    def has_content_regex(self) -> bool:
        return self.regex is not None and self.regex.pattern != ""

    @property
    def has_file_regex(self) -> bool:
        return self.file is not None and self.file.pattern != ""

    @property
    def has_path_regex(self) -> bool:
        return self.path is not None and self.path.pattern != ""

    @property
    def is_file_rule(self) -> bool:
        """True if this rule detects by file name or path rather than content."""
        return not self.has_content_regex and (self.has_file_regex or self.has_path_regex)

    def keyword_hit(self, line: str) -> bool:
        """Cheap pre-filter: a rule with keywords only runs on lines mentioning one."""
        if not self.keywords:
            return True
        lowered = line.lower()
        return any(k in lowered for k in self.keywords)
