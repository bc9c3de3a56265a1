"""Unified diff hunk parser.

Turns the body of a single-file diff into the lines a signature should see,
keeping the real file line number for each one.
"""

from __future__ import annotations

import re
from typing import Generator, List

from secretscout.git.models import DiffLine, HunkText, LineType

_HUNK_HEADER_RE = re.compile(
    r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@"
)
_BINARY_RE = re.compile(r"^Binary files .* and .* differ$", re.MULTILINE)
_NO_NEWLINE_RE = re.compile(r"^\\ No newline at end of file$")


def _strip_bom(line: str) -> str:
    """Remove UTF-8 BOM if present."""
    return line.lstrip("\ufeff")


def is_binary_patch(patch: str) -> bool:
    return bool(_BINARY_RE.search(patch))


class DiffParser:
    """Parse hunk text and yield one DiffLine per added, removed or context line.

    Usage::

        for line in DiffParser(patch).parse():
            if line.line_type == LineType.ADDED:
                ...
    """

    def __init__(self, patch: str) -> None:
        # only "\n" ends a diff line; form feeds and other separators are content
        if patch.endswith("\n"):
            patch = patch[:-1]
        self._lines = patch.split("\n") if patch else []

    def parse(self) -> Generator[DiffLine, None, None]:
        old_no = 0
        new_no = 0
        in_hunk = False

        for raw_line in self._lines:
            hm = _HUNK_HEADER_RE.match(raw_line)
            if hm:
                old_no = int(hm.group(1))
                new_no = int(hm.group(3))
                in_hunk = True
                continue

            if not in_hunk:
                continue
            if _NO_NEWLINE_RE.match(raw_line):
                continue

            if raw_line.startswith("+"):
                yield DiffLine(new_no, _strip_bom(raw_line[1:]).rstrip("\r"), LineType.ADDED)
                new_no += 1
            elif raw_line.startswith("-"):
                yield DiffLine(old_no, _strip_bom(raw_line[1:]).rstrip("\r"), LineType.REMOVED)
                old_no += 1
            elif raw_line.startswith(" ") or raw_line == "":
                yield DiffLine(new_no, raw_line[1:].rstrip("\r"), LineType.CONTEXT)
                old_no += 1
                new_no += 1


def parse_hunks(patch: str, *, deleted: bool = False) -> HunkText:
    """Rebuild scannable text from *patch*.

    Deleted files expose their removed lines (old-side numbers); every
    other change exposes added and context lines (new-side numbers).
    """
    wanted = (LineType.REMOVED,) if deleted else (LineType.ADDED, LineType.CONTEXT)
    contents: List[str] = []
    numbers: List[int] = []
    for line in DiffParser(patch).parse():
        if line.line_type in wanted:
            contents.append(line.content)
            numbers.append(line.line_no)
    return HunkText(text="\n".join(contents), line_numbers=numbers)
