"""JSON reporter for CI pipelines."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from gitsweep.findings.models import Leak
from gitsweep.findings.redactor import redact_leak


def to_dict(leak: Leak) -> Dict[str, Any]:
    """Convert a Leak to a JSON-serialisable dict."""
    return {
        "line": leak.line,
        "lineNumber": leak.line_number,
        "offender": leak.offender,
        "commit": leak.commit,
        "repo": leak.repo,
        "rule": leak.rule,
        "ruleId": leak.rule_id,
        "commitMessage": leak.message,
        "author": leak.author,
        "email": leak.email,
        "file": leak.file,
        "date": leak.date.isoformat(),
        "tags": leak.tags,
    }


def render(leaks: Sequence[Leak], *, redact: bool = False) -> str:
    """Return formatted JSON string."""
    items: List[Dict[str, Any]] = [
        to_dict(redact_leak(leak) if redact else leak) for leak in leaks
    ]
    return json.dumps(items, indent=2)
