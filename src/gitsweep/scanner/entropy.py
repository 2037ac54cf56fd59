"""Shannon entropy calculator and rule entropy gating."""

from __future__ import annotations

import math
from collections import Counter
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from gitsweep.rules.models import Rule


def shannon_entropy(s: str) -> float:
    """Compute Shannon entropy (bits per character) of string *s*.

    H = -Σ p(c) · log₂(p(c))  over unique characters c.
    """
    if not s:
        return 0.0
    counts = Counter(s)
    total = len(s)
    return -sum((c / total) * math.log2(c / total) for c in counts.values())


def tripped_entropy(groups: Sequence[str], rule: "Rule") -> bool:
    """Return True if any of the rule's entropy ranges is satisfied.

    *groups* holds the whole match at index 0 followed by each capture group.
    A range whose group index is out of bounds never trips.
    """
    for rng in rule.entropies:
        if rng.group < len(groups):
            h = shannon_entropy(groups[rng.group])
            if rng.min <= h <= rng.max:
                return True
    return False
