"""Shared scan state: findings, targets, repositories and counters.

Every mutation goes through one lock, held only for the dict/list update,
so ``len(findings) == stats.findings_total`` holds at every instant.
"""

from __future__ import annotations

import dataclasses
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from secretscout.findings.models import Finding
from secretscout.providers.models import Owner, OwnerKind, Repository


class Status(str, Enum):
    INITIALIZING = "initializing"
    GATHERING = "gathering"
    ANALYZING = "analyzing"
    FINISHED = "finished"


class RepositoryPhase(str, Enum):
    QUEUED = "queued"
    CLONING = "cloning"
    HISTORY_WALK = "history walk"
    CLEANUP = "cleanup"
    DONE = "done"
    FAILED = "failed"


@dataclass
class Stats:
    status: Status = Status.INITIALIZING
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None
    targets: int = 0
    organizations: int = 0
    users: int = 0
    repositories_found: int = 0
    repositories_cloned: int = 0
    repositories_empty: int = 0
    repositories_failed: int = 0
    repositories_scanned: int = 0
    commits_total: int = 0
    commits_scanned: int = 0
    commits_dirty: int = 0
    files_total: int = 0
    files_scanned: int = 0
    files_ignored: int = 0
    files_dirty: int = 0
    matches_rejected: int = 0
    findings_total: int = 0

    @property
    def elapsed_seconds(self) -> float:
        end = self.finished_at or datetime.now(timezone.utc)
        return (end - self.started_at).total_seconds()

    @property
    def progress(self) -> float:
        """Percentage of found repositories that have been scanned."""
        if self.repositories_found == 0:
            return 100.0 if self.status is Status.FINISHED else 0.0
        return min(100.0, 100.0 * self.repositories_scanned / self.repositories_found)


_COUNTERS = frozenset(
    f.name for f in dataclasses.fields(Stats) if f.type in ("int", int)
)


class ScanState:
    """Thread-safe store shared by every worker of a session."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._findings: Dict[str, Finding] = {}
        self._targets: List[Owner] = []
        self._repositories: List[Repository] = []
        self._phases: Dict[int, RepositoryPhase] = {}
        self.stats = Stats()

    # ---- findings ----

    def add_finding(self, finding: Finding) -> bool:
        """Store *finding* unless its secret_id is known. True if stored."""
        with self._lock:
            if finding.secret_id in self._findings:
                return False
            self._findings[finding.secret_id] = finding
            self.stats.findings_total += 1
            return True

    def sorted_findings(self) -> List[Finding]:
        with self._lock:
            return [self._findings[k] for k in sorted(self._findings)]

    # ---- targets & repositories ----

    def add_target(self, owner: Owner) -> bool:
        with self._lock:
            if any(t.id == owner.id for t in self._targets):
                return False
            self._targets.append(owner)
            self.stats.targets += 1
            if owner.kind is OwnerKind.ORGANIZATION:
                self.stats.organizations += 1
            else:
                self.stats.users += 1
            return True

    @property
    def targets(self) -> List[Owner]:
        with self._lock:
            return list(self._targets)

    def add_repository(self, repository: Repository) -> bool:
        with self._lock:
            if any(r.id == repository.id for r in self._repositories):
                return False
            self._repositories.append(repository)
            self._phases[repository.id] = RepositoryPhase.QUEUED
            return True

    @property
    def repositories(self) -> List[Repository]:
        with self._lock:
            return list(self._repositories)

    def set_phase(self, repository: Repository, phase: RepositoryPhase) -> None:
        with self._lock:
            self._phases[repository.id] = phase

    def phase(self, repository: Repository) -> Optional[RepositoryPhase]:
        with self._lock:
            return self._phases.get(repository.id)

    # ---- counters ----

    def increment(self, counter: str, amount: int = 1) -> None:
        if counter not in _COUNTERS or counter == "findings_total":
            raise ValueError(f"not an incrementable counter: {counter}")
        with self._lock:
            setattr(self.stats, counter, getattr(self.stats, counter) + amount)

    def set_status(self, status: Status) -> None:
        with self._lock:
            self.stats.status = status
            if status is Status.FINISHED:
                self.stats.finished_at = datetime.now(timezone.utc)

    def snapshot(self) -> Stats:
        """Copy of the counters, safe to read while workers keep running."""
        with self._lock:
            return dataclasses.replace(self.stats)
