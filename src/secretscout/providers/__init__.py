"""Source-control provider clients."""

from secretscout.providers.base import ProviderClient, ProviderError
from secretscout.providers.localgit import LocalGitProvider
from secretscout.providers.models import Owner, OwnerKind, Repository

__all__ = [
    "LocalGitProvider",
    "Owner",
    "OwnerKind",
    "ProviderClient",
    "ProviderError",
    "Repository",
]
