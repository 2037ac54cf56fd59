"""Leak model and redaction."""

from gitsweep.findings.models import NO_LINE_NUMBER, Leak
from gitsweep.findings.redactor import redact

__all__ = ["NO_LINE_NUMBER", "Leak", "redact"]
