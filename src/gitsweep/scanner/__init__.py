"""Scanner — entropy, leak detection, history and working-tree scans."""

from gitsweep.scanner.detector import detect
from gitsweep.scanner.entropy import shannon_entropy
from gitsweep.scanner.history import scan_history
from gitsweep.scanner.options import ScanError, ScanOptions
from gitsweep.scanner.worktree import scan_working_tree

__all__ = [
    "ScanError",
    "ScanOptions",
    "detect",
    "scan_history",
    "scan_working_tree",
    "shannon_entropy",
]
