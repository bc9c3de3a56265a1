"""Path facets that path, filename and extension signatures match against."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MatchTarget:
    path: str
    filename: str
    extension: str  # includes the leading dot, "" when there is none

    @classmethod
    def from_path(cls, path: str) -> "MatchTarget":
        """Build facets from a repository- or root-relative path.

        Backslashes are normalised so Windows paths match the same signatures.
        """
        normalised = path.replace("\\", "/")
        filename = posixpath.basename(normalised)
        _, extension = posixpath.splitext(filename)
        return cls(path=normalised, filename=filename, extension=extension)
