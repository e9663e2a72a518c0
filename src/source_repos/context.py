"""Application context for dependency injection.

This module is the single place where the catalog and its collaborators
are created and wired together. Nothing in the package reaches for a
module-level catalog; every consumer receives the instances it needs.

Collaborators are typed using Protocols (abstract interfaces) rather than
concrete implementations, so tests can construct AppContext directly
with test doubles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from source_repos.catalog import RepoCatalog
from source_repos.config import Settings
from source_repos.coordinator import RefreshCoordinator
from source_repos.lifecycle import LifecycleHub
from source_repos.protocols import RepoEnumerator, RepoUpdateExecutor


@dataclass
class AppContext:
    """Container for application dependencies."""

    settings: Settings
    catalog: RepoCatalog
    coordinator: RefreshCoordinator
    enumerator: RepoEnumerator
    updater: RepoUpdateExecutor
    lifecycle: LifecycleHub = field(default_factory=LifecycleHub)

    def close(self) -> None:
        """Release the catalog's delivery thread."""
        self.catalog.close()


def create_context(
    config_dir: Path | None = None,
    repos_dir: Path | None = None,
) -> AppContext:
    """Factory for application dependencies.

    Creates all services with proper wiring. Use this in production code.

    Args:
        config_dir: Override settings directory (for testing).
        repos_dir: Override the spec repos directory from settings.

    Returns:
        Configured AppContext with all dependencies.
    """
    from source_repos.config import ConfigManager
    from source_repos.gitops import GitRepos

    config = ConfigManager.create(config_dir) if config_dir else ConfigManager.create_default()
    settings = config.load()

    git_repos = GitRepos.create(
        repos_dir or settings.repos_dir,
        extra_defaults=settings.extra_default_addresses,
    )
    catalog = RepoCatalog.create()
    coordinator = RefreshCoordinator(catalog, enumerator=git_repos, updater=git_repos)

    return AppContext(
        settings=settings,
        catalog=catalog,
        coordinator=coordinator,
        enumerator=git_repos,
        updater=git_repos,
    )
