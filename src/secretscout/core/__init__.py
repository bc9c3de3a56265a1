"""Scan orchestration: gathering, repository analysis, local path scans."""

from secretscout.core.analysis import RepositoryAnalyzer
from secretscout.core.gathering import RepositoryGatherer, gather_targets
from secretscout.core.localpath import LocalPathScanner

__all__ = ["LocalPathScanner", "RepositoryAnalyzer", "RepositoryGatherer", "gather_targets"]
