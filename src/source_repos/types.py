"""Shared data types for the source repository catalog."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from source_repos.models import SourceRepo

__all__ = ["CatalogEvent", "CatalogEventKind", "Classification", "UpdateResult"]


class CatalogEventKind(str, Enum):
    """Kinds of catalog change."""

    REPLACED = "replaced"
    ADDED = "added"
    REFRESHED = "refreshed"
    STATUS_CHANGED = "status_changed"


@dataclass(frozen=True)
class CatalogEvent:
    """A change notification delivered to catalog observers.

    Attributes:
        kind: What happened.
        address: Affected address (None for REPLACED).
        repos: Snapshot copies of the affected repos. For REPLACED this is
            the whole new catalog.
    """

    kind: CatalogEventKind
    address: str | None
    repos: tuple[SourceRepo, ...] = ()

    @property
    def repo(self) -> SourceRepo | None:
        """The single affected repo, for per-entry events."""
        if self.address is None or not self.repos:
            return None
        return self.repos[0]


@dataclass(frozen=True)
class Classification:
    """Active/inactive partition of a catalog against a manifest."""

    active: tuple[SourceRepo, ...]
    inactive: tuple[SourceRepo, ...]

    @property
    def active_addresses(self) -> list[str]:
        """Addresses of the active repos, in catalog order."""
        return [r.address for r in self.active]

    @property
    def inactive_addresses(self) -> list[str]:
        """Addresses of the inactive repos, in catalog order."""
        return [r.address for r in self.inactive]


@dataclass
class UpdateResult:
    """Result of a completed repository update.

    Attributes:
        address: Address of the updated repository.
        display_name: Name shown to the user.
    """

    address: str
    display_name: str = ""

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.address:
            raise ValueError("address cannot be empty")
