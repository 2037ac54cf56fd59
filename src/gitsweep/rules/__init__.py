"""Rule model — rules, allowlists, entropy ranges."""

from gitsweep.rules.models import Allowlist, EntropyRange, Rule

__all__ = ["Allowlist", "EntropyRange", "Rule"]
