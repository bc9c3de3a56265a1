"""Scan session and shared state."""

from secretscout.session.session import Session
from secretscout.session.state import RepositoryPhase, ScanState, Stats, Status

__all__ = ["RepositoryPhase", "ScanState", "Session", "Stats", "Status"]
