"""Configuration schema: dataclasses for every config section."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Literal, Optional

OutputFormat = Literal["terminal", "json", "csv"]
ScanType = Literal["local-git", "local-path", "github", "gitlab"]

OUTPUT_FORMATS = ("terminal", "json", "csv")
SCAN_TYPES = ("local-git", "local-path", "github", "gitlab")

MIN_CONFIDENCE = 1
MAX_CONFIDENCE = 5

DEFAULT_SKIP_EXTENSIONS: List[str] = [
    "jpg", "jpeg", "png", "gif", "bmp", "tiff", "tif", "psd", "xcf", "pdf",
]
DEFAULT_SKIP_PATHS: List[str] = [
    "node_modules/", "vendor/bundle", "vendor/cache", "/proc/",
]


@dataclass
class ScanConfig:
    threads: int = -1  # -1 = one worker per CPU
    confidence_level: int = 3
    max_file_size_mb: int = 10
    commit_depth: int = -1  # -1 = full history
    scan_tests: bool = False
    hide_secrets: bool = False
    in_memory_clone: bool = False
    expand_orgs: bool = False
    scan_type: ScanType = "local-git"

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    @property
    def worker_count(self) -> int:
        """Resolve ``threads`` to a concrete worker count (at least 1)."""
        if self.threads <= 0:
            return os.cpu_count() or 1
        return self.threads


@dataclass
class IgnoreConfig:
    extensions: List[str] = field(default_factory=list)  # added to the defaults
    paths: List[str] = field(default_factory=list)

    @property
    def skippable_extensions(self) -> List[str]:
        return _merge(DEFAULT_SKIP_EXTENSIONS, [e.lstrip(".") for e in self.extensions])

    @property
    def skippable_paths(self) -> List[str]:
        return _merge(DEFAULT_SKIP_PATHS, self.paths)


@dataclass
class SignaturesConfig:
    file: Optional[str] = None  # None = bundled default signatures


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True


@dataclass
class ScoutConfig:
    version: str = "1.0"
    scan: ScanConfig = field(default_factory=ScanConfig)
    ignore: IgnoreConfig = field(default_factory=IgnoreConfig)
    signatures: SignaturesConfig = field(default_factory=SignaturesConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def _merge(defaults: List[str], extra: List[str]) -> List[str]:
    merged = list(defaults)
    for item in extra:
        item = item.strip().lower()
        if item and item not in merged:
            merged.append(item)
    return merged
