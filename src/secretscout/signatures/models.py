"""Signature data model: one tagged record for every signature kind."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class SignatureKind(str, Enum):
    EXACT = "exact"  # literal equality on a path facet
    REGEX = "regex"  # regex search on a path facet or on file content
    SUPPRESSOR = "suppressor"  # allow-list applied to content matches


class Part(str, Enum):
    PATH = "path"
    FILENAME = "filename"
    EXTENSION = "extension"
    CONTENT = "content"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Part":
        """Accept both ``filename`` and bundle-style ``partfilename``."""
        if not value:
            return cls.CONTENT
        name = value.strip().lower()
        if name.startswith("part"):
            name = name[len("part"):]
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"unknown signature part: {value!r}") from None


@dataclass(frozen=True)
class Signature:
    """A single detection or suppression rule.

    ``match`` keeps the raw pattern text so the signature stays printable;
    ``regex`` holds the compiled form for REGEX and SUPPRESSOR kinds and is
    ``None`` for EXACT signatures.
    """

    id: str
    kind: SignatureKind
    part: Part
    match: str
    description: str = ""
    comment: str = ""
    enabled: bool = True
    confidence_level: int = 3
    entropy: float = 0.0  # 0 disables the entropy check
    regex: Optional[re.Pattern[str]] = field(default=None, repr=False, compare=False)

    @classmethod
    def build(cls, kind: SignatureKind, part: Part, match: str, **kwargs) -> "Signature":
        """Create a signature, compiling ``match`` when the kind needs it.

        Raises ``re.error`` for an invalid pattern.
        """
        regex = re.compile(match) if kind is not SignatureKind.EXACT else None
        return cls(kind=kind, part=part, match=match, regex=regex, **kwargs)

    @property
    def is_content(self) -> bool:
        return self.part is Part.CONTENT


@dataclass(frozen=True)
class SignatureSet:
    """Signatures active for one session."""

    signatures: List[Signature] = field(default_factory=list)
    suppressors: List[Signature] = field(default_factory=list)
    version: str = ""

    def __len__(self) -> int:
        return len(self.signatures)
