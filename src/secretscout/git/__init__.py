"""Git layer: cloning, history walk, diff hunks."""

from secretscout.git.clone import (
    ClonedRepository,
    CloneError,
    Cloner,
    EmptyRepositoryError,
    GitCloner,
)
from secretscout.git.diff_parser import DiffParser, parse_hunks
from secretscout.git.history import EMPTY_TREE_SHA, changes_of, iter_commits
from secretscout.git.models import Change, ChangeAction, DiffLine, HunkText, LineType

__all__ = [
    "EMPTY_TREE_SHA",
    "Change",
    "ChangeAction",
    "CloneError",
    "ClonedRepository",
    "Cloner",
    "DiffLine",
    "DiffParser",
    "EmptyRepositoryError",
    "GitCloner",
    "HunkText",
    "LineType",
    "changes_of",
    "iter_commits",
    "parse_hunks",
]
