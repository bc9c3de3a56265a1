"""Signature engine: evaluate signatures against a path and its content.

Path, filename and extension signatures only look at the MatchTarget.
Content signatures read the file on disk and, for historical changes,
fall back to the change's diff hunk. Each regex hit must clear the
signature's entropy threshold and every suppressor before it counts.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from secretscout.git.models import HunkText
from secretscout.scanner.entropy import passes_threshold
from secretscout.scanner.matchtarget import MatchTarget
from secretscout.signatures.models import Part, Signature, SignatureKind, SignatureSet

logger = logging.getLogger(__name__)

REASON_NOT_FOUND = "not found"


@dataclass(frozen=True)
class Occurrence:
    index: int  # ordinal among accepted matches of one signature
    content: str
    line_number: int  # 0 for path, filename and extension matches


@dataclass
class Evaluation:
    matched: bool = False
    occurrences: List[Occurrence] = field(default_factory=list)
    rejected: int = 0  # entropy or suppressor rejections
    error: Optional[str] = None


class ContentSource:
    """Lazily reads, and caches, the text a content signature scans.

    ``path`` is the file on disk (``None`` when there is none). ``hunk`` loads
    the diff hunk of a historical change; local path scans pass ``None`` so
    they never fall back.
    """

    def __init__(
        self,
        path: Optional[Path],
        hunk: Optional[Callable[[], HunkText]] = None,
    ) -> None:
        self.path = path
        self._hunk_loader = hunk
        self._disk: Optional[str] = None
        self._disk_loaded = False
        self._hunk: Optional[HunkText] = None
        self.error: Optional[str] = None

    @property
    def has_history(self) -> bool:
        return self._hunk_loader is not None

    def disk_text(self) -> Optional[str]:
        if not self._disk_loaded:
            self._disk_loaded = True
            if self.path is not None and self.path.is_file() and not self.path.is_symlink():
                try:
                    self._disk = self.path.read_text(encoding="utf-8", errors="replace")
                except OSError as exc:
                    self.error = f"unable to read {self.path}: {exc.strerror or exc}"
                    logger.debug("Unable to read %s: %s", self.path, exc)
            elif not self.has_history:
                self.error = REASON_NOT_FOUND
        return self._disk

    def hunk(self) -> Optional[HunkText]:
        if self._hunk_loader is None:
            return None
        if self._hunk is None:
            self._hunk = self._hunk_loader()
        return self._hunk


def _match_value(m: re.Match[str]) -> str:
    """Prefer the named group ``secret`` when the pattern defines one."""
    if "secret" in m.re.groupindex and m.group("secret") is not None:
        return m.group("secret")
    return m.group(0)


def is_suppressed(value: str, suppressors: Iterable[Signature]) -> bool:
    return any(s.regex is not None and s.regex.search(value) for s in suppressors)


def _line_of(lines: Sequence[str], value: str, ordinal: int, offset_line: int) -> int:
    """1-based line of the *ordinal*-th line containing *value*.

    Two hits on one line leave fewer containing lines than ordinals; the last
    containing line is used then. Multi-line values fall back to the line the
    match starts on.
    """
    hits = [i + 1 for i, line in enumerate(lines) if value in line]
    if not hits:
        return offset_line
    return hits[min(ordinal, len(hits) - 1)]


def scan_text(
    signature: Signature,
    text: str,
    suppressors: Sequence[Signature] = (),
    hunk: Optional[HunkText] = None,
) -> Evaluation:
    """Run a content signature over *text*.

    When *text* was rebuilt from a hunk, *hunk* maps its lines back to the
    real file line numbers.
    """
    assert signature.regex is not None
    matches = list(signature.regex.finditer(text))
    if not matches:
        return Evaluation()

    lines = text.split("\n")
    seen: Dict[str, int] = {}
    result = Evaluation()
    for m in matches:
        value = _match_value(m)
        if value.endswith("\n"):
            value = value[:-1]
        if not value:
            continue
        if not passes_threshold(value, signature.entropy) or is_suppressed(value, suppressors):
            result.rejected += 1
            continue
        ordinal = seen.get(value, 0)
        seen[value] = ordinal + 1
        line = _line_of(lines, value, ordinal, text.count("\n", 0, m.start()) + 1)
        if hunk is not None:
            line = hunk.file_line(line)
        result.occurrences.append(Occurrence(len(result.occurrences), value, line))

    result.matched = bool(result.occurrences)
    return result


def _facet(target: MatchTarget, part: Part) -> str:
    if part is Part.PATH:
        return target.path
    if part is Part.FILENAME:
        return target.filename
    return target.extension


def evaluate(
    signature: Signature,
    target: MatchTarget,
    source: Optional[ContentSource] = None,
    suppressors: Sequence[Signature] = (),
) -> Evaluation:
    """Decide whether *signature* matches *target* (and its content)."""
    if signature.kind is SignatureKind.SUPPRESSOR:
        return Evaluation()

    if signature.part is not Part.CONTENT:
        facet = _facet(target, signature.part)
        if signature.kind is SignatureKind.EXACT:
            matched = facet == signature.match
        else:
            matched = signature.regex is not None and signature.regex.search(facet) is not None
        if not matched:
            return Evaluation()
        return Evaluation(matched=True, occurrences=[Occurrence(0, facet, 0)])

    # literal content signatures are not supported
    if signature.kind is SignatureKind.EXACT or source is None:
        return Evaluation()

    rejected = 0
    text = source.disk_text()
    if text is not None:
        found = scan_text(signature, text, suppressors)
        if found.matched:
            return found
        rejected = found.rejected

    hunk = source.hunk()
    if hunk is not None and hunk.text:
        found = scan_text(signature, hunk.text, suppressors, hunk=hunk)
        found.rejected += rejected
        return found

    return Evaluation(rejected=rejected, error=source.error)


@dataclass
class Discovery:
    signature: Signature
    occurrence: Occurrence


@dataclass
class DiscoverResult:
    discoveries: List[Discovery] = field(default_factory=list)
    rejected: int = 0
    errors: Dict[str, int] = field(default_factory=dict)

    @property
    def dirty(self) -> bool:
        return bool(self.discoveries)


def discover(
    target: MatchTarget,
    source: Optional[ContentSource],
    signatures: SignatureSet,
) -> DiscoverResult:
    """Evaluate every detecting signature and collect accepted occurrences."""
    result = DiscoverResult()
    for sig in signatures.signatures:
        ev = evaluate(sig, target, source, signatures.suppressors)
        result.rejected += ev.rejected
        if ev.error:
            result.errors[ev.error] = result.errors.get(ev.error, 0) + 1
        for occ in ev.occurrences:
            result.discoveries.append(Discovery(sig, occ))
    for reason, count in result.errors.items():
        logger.debug("%s: %s (x%d)", target.path, reason, count)
    return result
