"""Provider client interface."""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from secretscout.providers.models import Owner, Repository


class ProviderError(Exception):
    """Raised by a provider client for a target it cannot resolve or list."""


@runtime_checkable
class ProviderClient(Protocol):
    """What the gathering stage needs from a source-control host.

    Implementations own pagination: every method returns the complete list.
    """

    def resolve_owner(self, name: str) -> Owner: ...

    def list_repositories(self, owner: Owner) -> List[Repository]: ...

    def list_members(self, organization: Owner) -> List[Owner]: ...
