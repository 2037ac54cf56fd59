"""Secret value redaction for safe output."""

from __future__ import annotations

from dataclasses import replace

from gitsweep.findings.models import Leak

REDACTED = "[REDACTED]"


def redact_partial(value: str) -> str:
    """Partial reveal: first 4 + last 2 chars.

    Example: ``ghp_Abc123xyz9`` → ``ghp_...z9``
    """
    if len(value) <= 6:
        return REDACTED
    return f"{value[:4]}...{value[-2:]}"


def redact(value: str, *, full: bool = False) -> str:
    """Redact a matched secret value."""
    if full:
        return REDACTED
    return redact_partial(value)


def redact_leak(leak: Leak, *, full: bool = True) -> Leak:
    """Return a copy of *leak* with the offender hidden in both offender and line."""
    if leak.is_file_match:
        return leak
    masked = redact(leak.offender, full=full)
    return replace(leak, offender=masked, line=leak.line.replace(leak.offender, masked))
