"""Ignorability filter: decide whether a candidate file is worth scanning.

Checks run cheapest first and the first hit wins, so a skipped extension is
never opened and never reaches a signature.
"""

from __future__ import annotations

import codecs
import os
import posixpath
import re
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

REASON_MISSING = "missing"
REASON_SKIPPABLE = "skippable"
REASON_TEST = "test file"
REASON_TOO_LARGE = "too large"
REASON_BINARY = "binary"
REASON_UNREADABLE = "unreadable"
REASON_SYMLINK = "symlink"

SNIFF_BYTES = 512

_MAGIC_NUMBERS: Tuple[bytes, ...] = (
    b"\x1f\x8b\x08",  # gzip
    b"PK\x03\x04",  # zip, jar, docx
    b"\x89PNG",
    b"\xff\xd8\xff",  # jpeg
    b"GIF8",
    b"%PDF",
    b"\x7fELF",
    b"\xfe\xed\xfa\xce",  # Mach-O 32
    b"\xfe\xed\xfa\xcf",  # Mach-O 64
    b"\xce\xfa\xed\xfe",
    b"\xcf\xfa\xed\xfe",
    b"\xca\xfe\xba\xbe",  # Mach-O fat / java class
)

Decision = Tuple[bool, str]

_KEEP: Decision = (False, "")

_BZIP2_RE = re.compile(rb"BZh[1-9]")
_DOS_HEADER_SIZE = 0x40


def _is_pe(head: bytes) -> bool:
    """``MZ`` DOS header whose e_lfanew field points at a ``PE\\0\\0`` signature."""
    if not head.startswith(b"MZ") or len(head) < _DOS_HEADER_SIZE:
        return False
    offset = int.from_bytes(head[0x3C:_DOS_HEADER_SIZE], "little")
    return head[offset:offset + 4] == b"PE\x00\x00"


def is_binary(head: bytes) -> bool:
    """True if *head* starts with a known magic number or is not UTF-8 text."""
    if not head:
        return False
    if head.startswith(_MAGIC_NUMBERS) or _BZIP2_RE.match(head) or _is_pe(head):
        return True
    if b"\x00" in head:
        return True
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        # final=False: a multi-byte rune cut at the sniff boundary is fine
        decoder.decode(head, final=False)
    except UnicodeDecodeError:
        return True
    return False


def is_skippable(path: str, skippable_ext: Iterable[str], skippable_path: Iterable[str]) -> bool:
    lowered = "/" + path.replace("\\", "/").lower().lstrip("/")
    _, ext = posixpath.splitext(lowered)
    ext = ext.lstrip(".")
    if ext and ext in {e.lower().lstrip(".") for e in skippable_ext}:
        return True
    return any(item.lower() in lowered for item in skippable_path if item)


def is_test_path(path: str) -> bool:
    """Heuristic: tests live in ``test``-named directories or ``*_test``/``Test*`` files."""
    parts = path.replace("\\", "/").strip("/").split("/")
    directories, filename = parts[:-1], parts[-1]
    for segment in directories:
        lowered = segment.lower()
        if lowered.startswith("test") or lowered.endswith("_test") or lowered.endswith("_tests"):
            return True
    return "Test" in filename or "_test" in filename.lower()


def _path_checks(
    rel: str,
    scan_tests: bool,
    skippable_ext: Iterable[str],
    skippable_path: Iterable[str],
) -> Optional[Decision]:
    if is_skippable(rel, skippable_ext, skippable_path):
        return True, REASON_SKIPPABLE
    if not scan_tests and is_test_path(rel):
        return True, REASON_TEST
    return None


def should_ignore(
    path: Union[str, Path],
    max_size_bytes: int,
    scan_tests: bool,
    skippable_ext: Iterable[str],
    skippable_path: Iterable[str],
    relative_path: Optional[str] = None,
) -> Decision:
    """Return ``(ignore, reason)`` for the file at *path*.

    *relative_path* is the repository- or root-relative form used by the
    name-based checks, so a temporary clone directory never looks like a
    test directory. Defaults to *path* itself.
    """
    p = Path(path)
    if p.is_symlink():
        return True, REASON_SYMLINK
    if not p.exists():
        return True, REASON_MISSING

    hit = _path_checks(relative_path or str(p), scan_tests, skippable_ext, skippable_path)
    if hit:
        return hit

    try:
        size = p.stat().st_size
        if max_size_bytes and size > max_size_bytes:
            return True, REASON_TOO_LARGE
        if p.is_dir():
            return True, REASON_UNREADABLE
        with open(p, "rb") as f:
            head = f.read(SNIFF_BYTES)
    except OSError:
        return True, REASON_UNREADABLE

    if is_binary(head):
        return True, REASON_BINARY
    return _KEEP


def should_ignore_change(
    path: str,
    content: str,
    binary: bool,
    max_size_bytes: int,
    scan_tests: bool,
    skippable_ext: Iterable[str],
    skippable_path: Iterable[str],
) -> Decision:
    """Same checks for a historical change that is no longer on disk.

    *content* is the change's hunk text; *binary* comes from the diff itself.
    """
    hit = _path_checks(path, scan_tests, skippable_ext, skippable_path)
    if hit:
        return hit
    if max_size_bytes and len(content.encode("utf-8", errors="replace")) > max_size_bytes:
        return True, REASON_TOO_LARGE
    if binary:
        return True, REASON_BINARY
    return _KEEP


def relative_to(path: Union[str, Path], root: Union[str, Path]) -> str:
    """*path* relative to *root* with forward slashes."""
    return Path(os.path.relpath(path, root)).as_posix()


def is_inside(path: Union[str, Path], root: Union[str, Path]) -> bool:
    """True if *path* is not a symlink and resolves to a location under *root*."""
    p = Path(path)
    if p.is_symlink():
        return False
    return p.resolve().is_relative_to(Path(root).resolve())
