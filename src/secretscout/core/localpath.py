"""Plain directory scan: no history, only the files as they are on disk."""

from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List

from secretscout.findings.models import Finding
from secretscout.log import worker_logger
from secretscout.providers.localgit import stable_id
from secretscout.providers.models import Owner
from secretscout.scanner.engine import ContentSource, discover
from secretscout.scanner.ignore import relative_to, should_ignore
from secretscout.scanner.matchtarget import MatchTarget
from secretscout.session.session import Session
from secretscout.session.state import Status

FILE_SCAN_ACTION = "File Scan"


@dataclass(frozen=True)
class Candidate:
    path: Path
    relative: str
    root_name: str


def walk_files(root: Path) -> Iterator[Candidate]:
    """Yield every regular file under *root*, skipping ``.git`` directories."""
    root = root.resolve()
    if root.is_file():
        yield Candidate(root, root.name, root.parent.name)
        return
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d != ".git")
        for name in sorted(filenames):
            path = Path(dirpath) / name
            yield Candidate(path, relative_to(path, root), root.name)


class LocalPathScanner:
    """Scan directory trees with a bounded pool of file workers."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.logger = session.logger.getChild("localpath")

    def run(self, roots: List[str]) -> None:
        state = self.session.state
        state.set_status(Status.GATHERING)
        candidates: List[Candidate] = []
        for root in roots:
            path = Path(root).expanduser()
            if not path.exists():
                self.logger.warning("Skipping %s: path does not exist", root)
                continue
            state.add_target(Owner(id=stable_id(path), login=str(path.resolve())))
            candidates.extend(walk_files(path))

        if not candidates:
            self.logger.warning("No files to scan")
            return

        state.set_status(Status.ANALYZING)
        workers = max(1, min(self.session.config.scan.worker_count, len(candidates)))
        self.logger.info("Scanning %d files with %d workers", len(candidates), workers)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="localpath") as pool:
            futures = [pool.submit(self.scan_file, c) for c in candidates]
            try:
                wait(futures)
            except KeyboardInterrupt:
                self.session.cancel.set()
                self.logger.warning("Interrupted; finishing files already in progress")
                pool.shutdown(wait=True, cancel_futures=True)
        for future in futures:
            if not future.cancelled():
                future.result()

    def scan_file(self, candidate: Candidate) -> bool:
        """Scan one file. True if it produced at least one match."""
        if self.session.cancel.is_set():
            return False
        state = self.session.state
        cfg = self.session.config
        worker = threading.current_thread().name.rsplit("_", 1)[-1]
        log = worker_logger(self.logger, worker, candidate.root_name)
        state.increment("files_total")

        ignored, reason = should_ignore(
            candidate.path,
            cfg.scan.max_file_size_bytes,
            cfg.scan.scan_tests,
            cfg.ignore.skippable_extensions,
            cfg.ignore.skippable_paths,
            relative_path=candidate.relative,
        )
        if ignored:
            state.increment("files_ignored")
            log.debug("Ignoring %s: %s", candidate.relative, reason)
            return False

        result = discover(
            MatchTarget.from_path(candidate.relative),
            ContentSource(candidate.path),
            self.session.signatures,
        )
        if result.errors:
            state.increment("files_ignored")
            log.debug("Ignoring %s: %s", candidate.relative, ", ".join(result.errors))
        else:
            state.increment("files_scanned")
        if result.rejected:
            state.increment("matches_rejected", result.rejected)
        if not result.dirty:
            return False

        state.increment("files_dirty")
        for item in result.discoveries:
            finding = Finding.create(
                action=FILE_SCAN_ACTION,
                repository_owner="",
                repository_name=candidate.root_name,
                repository_url="",
                commit_hash="",
                commit_author="",
                commit_message="",
                file_path=candidate.relative,
                line_number=item.occurrence.line_number,
                signature_id=item.signature.id,
                description=item.signature.description,
                content=item.occurrence.content,
                hide_secrets=cfg.scan.hide_secrets,
                signatures_version=self.session.signatures.version,
                app_version=self.session.app_version,
            )
            if state.add_finding(finding):
                log.info(
                    "%s in %s:%s",
                    finding.description or finding.signature_id,
                    finding.file_path,
                    finding.line_number,
                )
        return True
