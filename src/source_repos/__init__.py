"""Source repository catalog for dependency-manager spec repos."""

__version__ = "0.1.0"

# Export protocol interfaces for type hints and dependency injection
from source_repos.protocols import (
    CatalogObserver,
    ManifestReader,
    RepoEnumerator,
    RepoUpdateExecutor,
)

__all__ = [
    "__version__",
    "CatalogObserver",
    "ManifestReader",
    "RepoEnumerator",
    "RepoUpdateExecutor",
]
