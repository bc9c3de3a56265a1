"""Scanner: signature engine, entropy, ignorability filter."""

from secretscout.scanner.engine import (
    ContentSource,
    DiscoverResult,
    Evaluation,
    Occurrence,
    discover,
    evaluate,
)
from secretscout.scanner.entropy import shannon_entropy
from secretscout.scanner.ignore import should_ignore, should_ignore_change
from secretscout.scanner.matchtarget import MatchTarget

__all__ = [
    "ContentSource",
    "DiscoverResult",
    "Evaluation",
    "MatchTarget",
    "Occurrence",
    "discover",
    "evaluate",
    "shannon_entropy",
    "should_ignore",
    "should_ignore_change",
]
