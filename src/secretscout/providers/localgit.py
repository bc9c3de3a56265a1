"""Provider client for git checkouts found under local directories."""

from __future__ import annotations

import hashlib
import logging
import os
from pathlib import Path
from typing import List

from git import InvalidGitRepositoryError, NoSuchPathError, Repo

from secretscout.providers.base import ProviderError
from secretscout.providers.models import Owner, OwnerKind, Repository

logger = logging.getLogger(__name__)

_SKIP_DIRS = {"node_modules", ".venv", "venv", "__pycache__"}


def stable_id(path: Path) -> int:
    """Numeric id derived from the absolute path, identical across runs."""
    digest = hashlib.sha1(str(path.resolve()).encode("utf-8")).hexdigest()
    return int(digest[:15], 16)


def find_git_dirs(root: Path) -> List[Path]:
    """Return every directory under *root* (inclusive) holding a ``.git`` entry."""
    found: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        if ".git" in dirnames or ".git" in filenames:
            found.append(Path(dirpath))
        dirnames[:] = sorted(d for d in dirnames if d != ".git" and d not in _SKIP_DIRS)
    return found


class LocalGitProvider:
    """Each target is a directory; its repositories are the checkouts below it."""

    def resolve_owner(self, name: str) -> Owner:
        path = Path(name).expanduser()
        if not path.is_dir():
            raise ProviderError(f"{name} does not exist or is not a directory")
        return Owner(
            id=stable_id(path),
            login=str(path.resolve()),
            kind=OwnerKind.USER,
            url="",
        )

    def list_repositories(self, owner: Owner) -> List[Repository]:
        repositories: List[Repository] = []
        for repo_dir in find_git_dirs(Path(owner.login)):
            try:
                repo = Repo(repo_dir)
            except (InvalidGitRepositoryError, NoSuchPathError) as exc:
                logger.warning("Skipping %s: not a usable git repository (%s)", repo_dir, exc)
                continue
            with repo:
                branch = None
                if repo.head.is_valid() and not repo.head.is_detached:
                    branch = repo.active_branch.name
            repositories.append(
                Repository(
                    id=stable_id(repo_dir),
                    owner=repo_dir.parent.name,
                    name=repo_dir.name,
                    clone_url=str(repo_dir),
                    url="",
                    default_branch=branch,
                )
            )
        return repositories

    def list_members(self, organization: Owner) -> List[Owner]:
        return []
