"""Data models for commit changes and parsed diff hunks."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class LineType(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"


class ChangeAction(str, Enum):
    ADD = "Add"
    MODIFY = "Modify"
    DELETE = "Delete"
    RENAME = "Rename"


@dataclass(frozen=True, slots=True)
class DiffLine:
    """A single line of a hunk with its real line number in the file."""

    line_no: int
    content: str
    line_type: LineType


@dataclass(frozen=True)
class HunkText:
    """Scannable text rebuilt from a change's hunks.

    ``line_numbers[i]`` is the file line of the (i + 1)-th line of ``text``.
    """

    text: str = ""
    line_numbers: List[int] = field(default_factory=list)

    def file_line(self, text_line: int) -> int:
        if 0 < text_line <= len(self.line_numbers):
            return self.line_numbers[text_line - 1]
        return text_line


@dataclass
class Change:
    """One file delta inside one commit.

    ``patch`` is the raw unified-diff body; it is only decoded and parsed
    when ``hunk()`` is first called.
    """

    action: ChangeAction
    path: str  # old path for deletes, new path otherwise
    old_path: Optional[str] = None  # set on renames
    binary: bool = False
    patch: bytes = b""
    _hunk: Optional[HunkText] = field(default=None, init=False, repr=False, compare=False)

    def hunk(self) -> HunkText:
        if self._hunk is None:
            from secretscout.git.diff_parser import parse_hunks

            text = self.patch.decode("utf-8", errors="replace")
            self._hunk = parse_hunks(text, deleted=self.action is ChangeAction.DELETE)
        return self._hunk
