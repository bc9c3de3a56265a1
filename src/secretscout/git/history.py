"""Commit history walk: commits HEAD-first and the file changes of each."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import FrozenSet, Iterator, List, Optional

from git import Commit, Diff, Repo
from git.objects import Tree

from secretscout.git.diff_parser import is_binary_patch
from secretscout.git.models import Change, ChangeAction

logger = logging.getLogger(__name__)

# The tree object of an empty directory; every git knows it without storing it.
EMPTY_TREE_SHA = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"


def iter_commits(repo: Repo, depth: int = 0) -> Iterator[Commit]:
    """Yield commits reachable from HEAD, newest first.

    *depth* > 0 caps the number of commits walked.
    """
    kwargs = {"max_count": depth} if depth > 0 else {}
    yield from repo.iter_commits("HEAD", **kwargs)


def empty_tree(repo: Repo) -> Tree:
    return Tree(repo, bytes.fromhex(EMPTY_TREE_SHA))


def shallow_boundary(repo: Repo) -> FrozenSet[str]:
    """Commits whose parents were cut off by a shallow clone.

    Git lists them in ``.git/shallow``; their parent objects are not in the
    repository even though the commit still names them.
    """
    path = Path(repo.git_dir) / "shallow"
    if not path.is_file():
        return frozenset()
    return frozenset(line.strip() for line in path.read_text().splitlines() if line.strip())


def _classify(diff: Diff) -> ChangeAction:
    if diff.new_file:
        return ChangeAction.ADD
    if diff.deleted_file:
        return ChangeAction.DELETE
    if diff.renamed_file:
        return ChangeAction.RENAME
    return ChangeAction.MODIFY


def _to_change(diff: Diff) -> Change:
    action = _classify(diff)
    path = diff.a_path if action is ChangeAction.DELETE else diff.b_path
    patch = diff.diff if isinstance(diff.diff, bytes) else (diff.diff or "").encode("utf-8")
    return Change(
        action=action,
        path=path or diff.a_path or "",
        old_path=diff.a_path if action is ChangeAction.RENAME else None,
        binary=is_binary_patch(patch[:512].decode("utf-8", errors="replace")),
        patch=patch,
    )


def changes_of(commit: Commit, repo: Repo, boundary: Optional[FrozenSet[str]] = None) -> List[Change]:
    """Diff *commit* against its first parent, or the empty tree for a root commit.

    Root commits therefore report every file as ``Add``, and so do the
    commits in *boundary* (see :func:`shallow_boundary`). Renames are
    detected by git (``-M``).
    """
    if boundary is None:
        boundary = shallow_boundary(repo)
    if commit.parents and commit.hexsha not in boundary:
        base = commit.parents[0]
    else:
        base = empty_tree(repo)
    diffs = base.diff(commit, create_patch=True)
    changes = [_to_change(d) for d in diffs]
    logger.debug("Commit %s: %d changes", commit.hexsha[:8], len(changes))
    return changes
