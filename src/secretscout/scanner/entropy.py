"""Shannon entropy of matched substrings."""

from __future__ import annotations

import math
from collections import Counter


def shannon_entropy(s: str) -> float:
    """Compute Shannon entropy (bits per character) of string *s*.

    H = log₂(n) − Σ c·log₂(c) / n  over character counts c, n = len(s).
    """
    if not s:
        return 0.0
    total = len(s)
    counts = Counter(s).values()
    return math.log2(total) - sum(c * math.log2(c) for c in counts) / total


def passes_threshold(s: str, threshold: float) -> bool:
    """True when *threshold* is disabled (0) or *s* reaches it."""
    if threshold <= 0:
        return True
    return shannon_entropy(s) >= threshold
