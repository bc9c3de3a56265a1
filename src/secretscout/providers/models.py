"""Owners and repositories as reported by a source-control provider."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OwnerKind(str, Enum):
    USER = "User"
    ORGANIZATION = "Organization"


@dataclass(frozen=True)
class Owner:
    id: int
    login: str
    kind: OwnerKind = OwnerKind.USER
    url: str = ""


@dataclass(frozen=True)
class Repository:
    id: int
    owner: str
    name: str
    clone_url: str
    url: str = ""  # web URL, "" for local repositories
    default_branch: Optional[str] = None
    description: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}" if self.owner else self.name
