"""Target and repository gathering through a provider client."""

from __future__ import annotations

import queue
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from secretscout.log import worker_logger
from secretscout.providers.base import ProviderClient, ProviderError
from secretscout.providers.models import Owner, OwnerKind
from secretscout.session.session import Session
from secretscout.session.state import Status


def gather_targets(
    session: Session,
    provider: ProviderClient,
    names: Iterable[str],
    expand_orgs: bool = False,
) -> List[Owner]:
    """Resolve *names* to owners and register them as targets.

    With *expand_orgs*, the members of every organization become targets
    too. A name that cannot be resolved is a warning, not an error.
    """
    logger = session.logger.getChild("gathering")
    state = session.state
    state.set_status(Status.GATHERING)

    for name in names:
        try:
            owner = provider.resolve_owner(name)
        except ProviderError as exc:
            logger.warning("Skipping target %s: %s", name, exc)
            continue
        state.add_target(owner)

        if expand_orgs and owner.kind is OwnerKind.ORGANIZATION:
            try:
                members = provider.list_members(owner)
            except ProviderError as exc:
                logger.warning("Cannot list members of %s: %s", owner.login, exc)
                continue
            added = sum(1 for member in members if state.add_target(member))
            logger.info("Added %d members of %s as targets", added, owner.login)

    return state.targets


class RepositoryGatherer:
    """List the repositories of every target with a bounded worker pool."""

    def __init__(
        self,
        session: Session,
        provider: ProviderClient,
        repo_filter: Optional[Iterable[str]] = None,
    ) -> None:
        self.session = session
        self.provider = provider
        self.repo_filter = {r.strip() for r in repo_filter or () if r.strip()}
        self.logger = session.logger.getChild("gathering")

    def run(self, targets: Optional[List[Owner]] = None) -> None:
        state = self.session.state
        owners = state.targets if targets is None else targets
        if not owners:
            self.logger.warning("No targets to gather repositories from")
            return

        work: "queue.Queue[Owner]" = queue.Queue()
        for owner in owners:
            work.put(owner)

        workers = max(1, min(self.session.config.scan.worker_count, len(owners)))
        state.set_status(Status.GATHERING)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="gather") as pool:
            futures = [pool.submit(self._worker, i, work) for i in range(workers)]
            try:
                for future in futures:
                    future.result()
            except KeyboardInterrupt:
                self.session.cancel.set()
                self.logger.warning("Interrupted; finishing targets already in progress")

        self.logger.info("Gathered %d repositories", len(state.repositories))

    def _worker(self, worker_id: int, work: "queue.Queue[Owner]") -> None:
        while not self.session.cancel.is_set():
            try:
                owner = work.get_nowait()
            except queue.Empty:
                return
            try:
                self.gather(owner, worker_id)
            finally:
                work.task_done()

    def gather(self, owner: Owner, worker_id: int = 0) -> int:
        """Add the repositories of *owner*. Returns how many were new."""
        state = self.session.state
        log = worker_logger(self.logger, worker_id, owner.login)
        try:
            repositories = self.provider.list_repositories(owner)
        except (ProviderError, OSError) as exc:
            log.warning("Cannot list repositories: %s", exc)
            return 0

        added = 0
        for repository in repositories:
            state.increment("repositories_found")
            if self.repo_filter and repository.name not in self.repo_filter:
                continue
            if state.add_repository(repository):
                added += 1
                log.debug("Queued %s", repository.full_name)
        return added
