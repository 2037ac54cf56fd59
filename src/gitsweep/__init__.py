"""gitsweep — find secrets leaked into git history and uncommitted changes."""

__version__ = "0.1.0"
