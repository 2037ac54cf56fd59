"""Unified diff parser.

Only added content matters for leak detection, so removed and context lines
are consumed without being reported. Each file section yields a DiffFile (or
a FileSkipped for binary and mode-only changes) followed by its added lines.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple, Union

from gitsweep.git.models import DiffFile, DiffLine, FileSkipped

DiffItem = Union[DiffFile, DiffLine, FileSkipped]

_DIFF_HEADER = "diff --git "
_QUOTED = r'"(?:[^"\\]|\\.)*"'
_HEADER_PATHS_RE = re.compile(rf"^(?P<old>{_QUOTED}|a/.*?) (?P<new>{_QUOTED}|b/.*)$")
_HUNK_HEADER_RE = re.compile(r"^@@ -\d+(?:,\d+)? \+\d+(?:,\d+)? @@")
_RENAME_TO_RE = re.compile(r"^rename to (.+)$")
_IGNORED_RE = re.compile(
    r"^(?:[+-]?Subproject commit [0-9a-f]+|\\ No newline at end of file)$"
)

# extended header lines that only set a flag on the file being parsed
_FLAG_LINES = (
    (re.compile(r"^index [0-9a-f]+\.\.[0-9a-f]+"), None),
    (re.compile(r"^(?:similarity|dissimilarity) index \d+%$"), None),
    (re.compile(r"^(?:new|new file) mode \d+$"), None),
    (re.compile(r"^rename from .+$"), None),
    (re.compile(r"^(?:---|\+\+\+) "), None),
    (re.compile(r"^old mode \d+$"), "mode_change"),
    (re.compile(r"^deleted file mode \d+$"), "deleted"),
    (re.compile(r"^Binary files .* and .* differ$"), "binary"),
)

_C_ESCAPES = {"a": "\a", "b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t", "v": "\v"}


def unquote_path(token: str) -> str:
    """Undo git's C-style quoting of a path (``"caf\\303\\251.py"``)."""
    if not (len(token) >= 2 and token[0] == token[-1] == '"'):
        return token
    body = token[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != "\\" or i + 1 == len(body):
            out += ch.encode("utf-8")
            i += 1
            continue
        nxt = body[i + 1]
        if nxt in "01234567":
            digits = re.match(r"[0-7]{1,3}", body[i + 1:]).group(0)
            out.append(int(digits, 8) & 0xFF)
            i += 1 + len(digits)
        else:
            out += _C_ESCAPES.get(nxt, nxt).encode("utf-8")
            i += 2
    return out.decode("utf-8", errors="replace")


def _strip_prefix(path: str, prefix: str) -> str:
    return path[len(prefix):] if path.startswith(prefix) else path


def header_paths(line: str) -> Optional[Tuple[str, str]]:
    """Return the (old, new) paths named by a ``diff --git`` line, or None.

    Unquoted paths may contain spaces; when both sides name the same file the
    line is split in the middle, which is the only unambiguous reading.
    """
    rest = line[len(_DIFF_HEADER):]
    half, odd = divmod(len(rest) - 1, 2)
    if not odd and rest[half:half + 1] == " ":
        old, new = rest[:half], rest[half + 1:]
        if old.startswith("a/") and new.startswith("b/") and old[2:] == new[2:]:
            return old[2:], new[2:]
    m = _HEADER_PATHS_RE.match(rest)
    if not m:
        return None
    return (
        _strip_prefix(unquote_path(m.group("old")), "a/"),
        _strip_prefix(unquote_path(m.group("new")), "b/"),
    )


@dataclass
class _Header:
    path: str
    mode_change: bool = False
    deleted: bool = False
    binary: bool = False


class DiffParser:
    """Parse unified diff text into DiffFile / DiffLine / FileSkipped items.

    Usage::

        for item in DiffParser(diff_text).parse():
            if isinstance(item, DiffLine):
                ...
    """

    def __init__(self, diff_text: str) -> None:
        self._lines = diff_text.splitlines()
        self._pos = 0

    def parse(self) -> Iterator[DiffItem]:
        self._pos = 0
        current: Optional[str] = None

        while self._pos < len(self._lines):
            line = self._lines[self._pos]
            self._pos += 1
            if line.startswith(_DIFF_HEADER):
                paths = header_paths(line)
                if paths is None:
                    # unreadable header: skip the whole section
                    current = None
                    continue
                header = self._read_header(paths[1])
                item = self._file_item(header)
                current = header.path if isinstance(item, DiffFile) else None
                yield item
                continue

            if current is None or _IGNORED_RE.match(line) or _HUNK_HEADER_RE.match(line):
                continue
            if line.startswith("+"):
                content = line[1:].lstrip("\ufeff").rstrip("\r")
                yield DiffLine(file=current, content=content)

    def _read_header(self, path: str) -> _Header:
        """Consume the extended header lines following ``diff --git``."""
        header = _Header(path=path)
        while self._pos < len(self._lines):
            line = self._lines[self._pos]
            rename = _RENAME_TO_RE.match(line)
            if rename:
                header.path = unquote_path(rename.group(1))
            else:
                flag = next(
                    (attr for pattern, attr in _FLAG_LINES if pattern.match(line)),
                    False,
                )
                if flag is False:
                    break
                if flag:
                    setattr(header, flag, True)
            self._pos += 1
        return header

    def _file_item(self, header: _Header) -> Union[DiffFile, FileSkipped]:
        if header.binary and not header.deleted:
            return FileSkipped(path=header.path, reason="binary")
        if header.mode_change and not self._hunk_follows():
            return FileSkipped(path=header.path, reason="mode_only")
        return DiffFile(path=header.path, deleted=header.deleted)

    def _hunk_follows(self) -> bool:
        """True if a hunk header appears before the next file section."""
        for line in self._lines[self._pos:]:
            if line.startswith(_DIFF_HEADER):
                return False
            if _HUNK_HEADER_RE.match(line):
                return True
        return False


def added_content(diff_text: str) -> Dict[str, str]:
    """Reconstruct the added content of every file in *diff_text*.

    Returns ``{path: text}`` in diff order; *text* is the file's added lines
    joined with newlines. Binary files map to an empty string so file name
    rules still see them; deleted and mode-only files are left out.
    """
    lines: Dict[str, List[str]] = {}
    for item in DiffParser(diff_text).parse():
        if isinstance(item, DiffFile):
            if not item.deleted:
                lines.setdefault(item.path, [])
        elif isinstance(item, FileSkipped):
            if item.reason == "binary":
                lines.setdefault(item.path, [])
        elif item.file in lines:
            lines[item.file].append(item.content)
    return {path: "\n".join(added) for path, added in lines.items()}
