"""Protocol definitions for the catalog's collaborators.

The catalog core only talks to the outside world through these
interfaces:
- an enumerator that lists the repositories present in the environment
- an executor that updates one repository
- a manifest reader that supplies declared addresses
- observers that receive typed change events

All concrete implementations satisfy these protocols structurally (duck typing).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from source_repos.models import SourceRepo
    from source_repos.types import CatalogEvent


@runtime_checkable
class RepoEnumerator(Protocol):
    """Protocol for listing the source repositories in the environment."""

    async def enumerate(self) -> Sequence[SourceRepo]:
        """Enumerate all known repositories.

        Returns:
            Repositories with their display fields and default flag set.

        Raises:
            Exception: Any failure; the coordinator reports it as
                DiscoveryFailedError.
        """
        ...


@runtime_checkable
class RepoUpdateExecutor(Protocol):
    """Protocol for updating a single source repository."""

    async def run_update(self, repo: SourceRepo) -> None:
        """Bring one repository up to date.

        Args:
            repo: Snapshot of the repository to update.

        Raises:
            Exception: Any failure; the coordinator reports it as
                UpdateFailedError.
        """
        ...


@runtime_checkable
class ManifestReader(Protocol):
    """Protocol for reading the addresses a project manifest declares."""

    def declared_addresses(self) -> list[str]:
        """Get declared repository addresses in declaration order.

        Returns:
            List of addresses, possibly empty.
        """
        ...


@runtime_checkable
class CatalogObserver(Protocol):
    """Protocol for catalog change observers."""

    def __call__(self, event: CatalogEvent) -> None:
        """Receive one change event on the catalog's delivery thread."""
        ...
