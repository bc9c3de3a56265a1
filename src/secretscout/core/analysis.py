"""Repository analysis: clone, walk history, scan every change.

A fixed pool of workers drains a queue of repositories. Each repository
moves through QUEUED → CLONING → HISTORY_WALK → CLEANUP → DONE (or FAILED),
and its clone is always removed, whatever happened during the walk.
"""

from __future__ import annotations

import logging
import queue
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from git import Commit, GitCommandError

from secretscout.findings.models import Finding
from secretscout.git.clone import ClonedRepository, CloneError, Cloner, EmptyRepositoryError, GitCloner
from secretscout.git.history import changes_of, iter_commits, shallow_boundary
from secretscout.git.models import Change
from secretscout.log import worker_logger
from secretscout.providers.models import Repository
from secretscout.scanner.engine import ContentSource, discover
from secretscout.scanner.ignore import is_inside, should_ignore, should_ignore_change
from secretscout.scanner.matchtarget import MatchTarget
from secretscout.session.session import Session
from secretscout.session.state import RepositoryPhase, Status


def _author(commit: Commit) -> str:
    author = commit.author
    if author.email:
        return f"{author.name} <{author.email}>"
    return author.name or ""


class RepositoryAnalyzer:
    """Scan the git history of every repository in the session."""

    def __init__(
        self,
        session: Session,
        cloner: Optional[Cloner] = None,
        auth: Optional[str] = None,
    ) -> None:
        self.session = session
        self.cloner = cloner or GitCloner()
        self.auth = auth
        self.logger = session.logger.getChild("analysis")

    # ---- pool ----

    def run(self, repositories: Optional[List[Repository]] = None) -> None:
        state = self.session.state
        repos = state.repositories if repositories is None else repositories
        if not repos:
            self.logger.warning("No repositories to analyze")
            return

        work: "queue.Queue[Repository]" = queue.Queue()
        for repo in repos:
            work.put(repo)

        workers = max(1, min(self.session.config.scan.worker_count, len(repos)))
        state.set_status(Status.ANALYZING)
        self.logger.info("Analyzing %d repositories with %d workers", len(repos), workers)

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="analyze") as pool:
            futures = [pool.submit(self._worker, i, work) for i in range(workers)]
            try:
                for future in futures:
                    future.result()
            except KeyboardInterrupt:
                self.session.cancel.set()
                self.logger.warning("Interrupted; finishing repositories already in progress")

    def _worker(self, worker_id: int, work: "queue.Queue[Repository]") -> None:
        while not self.session.cancel.is_set():
            try:
                repository = work.get_nowait()
            except queue.Empty:
                return
            try:
                self.analyze(repository, worker_id)
            finally:
                work.task_done()

    # ---- one repository ----

    def analyze(self, repository: Repository, worker_id: int = 0) -> None:
        state = self.session.state
        scan_cfg = self.session.config.scan
        log = worker_logger(self.logger, worker_id, repository.full_name)

        state.set_phase(repository, RepositoryPhase.CLONING)
        log.debug("Cloning %s", repository.clone_url)
        try:
            cloned = self.cloner.clone(
                repository,
                depth=max(scan_cfg.commit_depth, 0),
                in_memory=scan_cfg.in_memory_clone,
                auth=self.auth,
            )
        except EmptyRepositoryError as exc:
            state.increment("repositories_cloned")
            state.increment("repositories_empty")
            state.set_phase(repository, RepositoryPhase.DONE)
            log.warning("%s", exc)
            return
        except CloneError as exc:
            state.increment("repositories_failed")
            state.set_phase(repository, RepositoryPhase.FAILED)
            log.error("Clone failed: %s", exc)
            return

        state.increment("repositories_cloned")
        final = RepositoryPhase.FAILED
        try:
            state.set_phase(repository, RepositoryPhase.HISTORY_WALK)
            self._walk(cloned, repository, log)
            final = RepositoryPhase.DONE
            state.increment("repositories_scanned")
        except (GitCommandError, ValueError, OSError) as exc:
            state.increment("repositories_failed")
            log.error("Cannot read history: %s", exc)
        finally:
            state.set_phase(repository, RepositoryPhase.CLEANUP)
            cloned.cleanup()
            state.set_phase(repository, final)

    def _walk(self, cloned: ClonedRepository, repository: Repository, log: logging.LoggerAdapter) -> None:
        state = self.session.state
        depth = max(self.session.config.scan.commit_depth, 0)
        boundary = shallow_boundary(cloned.repo)
        for commit in iter_commits(cloned.repo, depth):
            state.increment("commits_total")
            dirty = False
            for change in changes_of(commit, cloned.repo, boundary):
                if self._scan_change(change, commit, cloned, repository, log):
                    dirty = True
            state.increment("commits_scanned")
            if dirty:
                state.increment("commits_dirty")
        log.debug("History walk finished")

    def _scan_change(
        self,
        change: Change,
        commit: Commit,
        cloned: ClonedRepository,
        repository: Repository,
        log: logging.LoggerAdapter,
    ) -> bool:
        """Scan one changed file. True if it produced at least one match."""
        state = self.session.state
        cfg = self.session.config
        state.increment("files_total")

        disk_path = cloned.path / change.path
        ignore_args = (
            cfg.scan.max_file_size_bytes,
            cfg.scan.scan_tests,
            cfg.ignore.skippable_extensions,
            cfg.ignore.skippable_paths,
        )
        # symlinks and paths escaping the clone are scanned from their hunk only
        on_disk = disk_path.exists() and is_inside(disk_path, cloned.path)
        if on_disk:
            ignored, reason = should_ignore(disk_path, *ignore_args, relative_path=change.path)
        else:
            ignored, reason = should_ignore_change(change.path, change.hunk().text, change.binary, *ignore_args)
        if ignored:
            state.increment("files_ignored")
            log.debug("Ignoring %s: %s", change.path, reason)
            return False

        result = discover(
            MatchTarget.from_path(change.path),
            ContentSource(disk_path if on_disk else None, hunk=change.hunk),
            self.session.signatures,
        )
        if result.errors:
            state.increment("files_ignored")
            log.debug("Ignoring %s: %s", change.path, ", ".join(result.errors))
        else:
            state.increment("files_scanned")
        if result.rejected:
            state.increment("matches_rejected", result.rejected)
        if not result.dirty:
            return False

        state.increment("files_dirty")
        for item in result.discoveries:
            finding = Finding.create(
                action=change.action.value,
                repository_owner=repository.owner,
                repository_name=repository.name,
                repository_url=repository.url,
                commit_hash=commit.hexsha,
                commit_author=_author(commit),
                commit_message=str(commit.message),
                file_path=change.path,
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
                    "%s in %s:%s (commit %s)",
                    finding.description or finding.signature_id,
                    finding.file_path,
                    finding.line_number,
                    commit.hexsha[:8],
                )
        return True
