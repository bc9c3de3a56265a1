"""Clone provider: materialise a repository in a temporary directory."""

from __future__ import annotations

import logging
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import quote, urlsplit, urlunsplit

from git import GitCommandError, Repo

from secretscout.providers.models import Repository

logger = logging.getLogger(__name__)

TEMP_PREFIX = "secretscout"


class CloneError(Exception):
    """Raised when a repository cannot be cloned."""


class EmptyRepositoryError(CloneError):
    """Raised when the clone succeeded but the repository has no commits."""


@dataclass
class ClonedRepository:
    repo: Repo
    path: Path  # removed by cleanup()

    def cleanup(self) -> None:
        self.repo.close()
        shutil.rmtree(self.path, ignore_errors=True)


class Cloner(Protocol):
    def clone(
        self,
        repository: Repository,
        *,
        depth: int = 0,
        in_memory: bool = False,
        auth: Optional[str] = None,
    ) -> ClonedRepository: ...


def authenticated_url(url: str, token: Optional[str]) -> str:
    """Embed *token* as the userinfo of an http(s) *url*."""
    if not token:
        return url
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https"):
        return url
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    netloc = f"{quote(token, safe='')}@{host}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


def _clone_source(url: str) -> str:
    path = Path(url)
    if "://" not in url and path.exists():
        # file:// makes --depth apply to local clones too
        return path.resolve().as_uri()
    return url


class GitCloner:
    """Clone with GitPython into ``tempfile.mkdtemp``.

    ``in_memory`` is accepted for interface compatibility; GitPython drives the
    git binary, which needs a working tree on disk, so a temporary directory is
    always used.
    """

    def clone(
        self,
        repository: Repository,
        *,
        depth: int = 0,
        in_memory: bool = False,
        auth: Optional[str] = None,
    ) -> ClonedRepository:
        if in_memory:
            logger.debug("In-memory clone requested for %s; using a temporary directory", repository.full_name)

        target = Path(tempfile.mkdtemp(prefix=TEMP_PREFIX))
        kwargs = {"no_tags": True}
        if depth > 0:
            kwargs["depth"] = depth
        if repository.default_branch:
            kwargs["branch"] = repository.default_branch
            kwargs["single_branch"] = True

        url = authenticated_url(_clone_source(repository.clone_url), auth)
        try:
            repo = Repo.clone_from(url, target, **kwargs)
        except GitCommandError as exc:
            shutil.rmtree(target, ignore_errors=True)
            # never echo the URL: it may carry a token
            raise CloneError(f"git clone of {repository.full_name} failed (exit {exc.status})") from None

        cloned = ClonedRepository(repo=repo, path=target)
        if not repo.head.is_valid():
            cloned.cleanup()
            raise EmptyRepositoryError(f"{repository.full_name} has no commits")
        return cloned
