"""Configuration schema — resolved config and its inheritance declaration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from gitsweep.rules.models import Allowlist, Rule

MAX_EXTEND_DEPTH = 2


@dataclass(frozen=True)
class Extends:
    """Where a config inherits further rules and allowlists from."""

    path: Optional[str] = None
    use_default: bool = False

    @property
    def is_set(self) -> bool:
        return self.use_default or bool(self.path)


@dataclass
class Config:
    """A fully resolved configuration. Read-only once scanning starts."""

    description: str = ""
    rules: Dict[str, Rule] = field(default_factory=dict)
    allowlist: Allowlist = field(default_factory=Allowlist)
    keywords: List[str] = field(default_factory=list)
    extends: Extends = field(default_factory=Extends)
    path: Optional[str] = None

    def file_rules(self) -> List[Rule]:
        return [r for r in self.rules.values() if r.is_file_rule]

    def content_rules(self) -> List[Rule]:
        return [r for r in self.rules.values() if r.has_content_regex]
