"""Git operations for spec repositories on disk."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from git import Remote, Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from source_repos.models import SourceRepo

logger = logging.getLogger(__name__)

# Default location of CocoaPods spec repos
REPOS_DIR = Path.home() / ".cocoapods" / "repos"

# Marker file holding the address of a CDN-backed (trunk) repo
CDN_URL_FILE = ".url"


class GitOpsError(Exception):
    """Error during git operations."""

    pass


def tracked_remote(repo: Repo) -> Remote | None:
    """Pick the remote a checkout is read from and updated against.

    Returns:
        The origin remote, else the first remote, or None without remotes.
    """
    remotes = list(repo.remotes)
    for remote in remotes:
        if remote.name == "origin":
            return remote
    return remotes[0] if remotes else None


class GitRepos:
    """Enumerates and updates the spec repositories in a repos directory.

    Satisfies both the RepoEnumerator and RepoUpdateExecutor protocols.
    """

    def __init__(
        self,
        repos_dir: Path | None = None,
        extra_defaults: list[str] | None = None,
    ) -> None:
        """Initialize git operations manager.

        Args:
            repos_dir: Directory holding one checkout per repo. Defaults to
                ~/.cocoapods/repos.
            extra_defaults: Additional addresses treated as the default repo.

        Note:
            Prefer using factory methods `create()` or `create_default()` for construction.
        """
        self.repos_dir = repos_dir or REPOS_DIR
        self.extra_defaults = list(extra_defaults or [])

    @classmethod
    def create(cls, repos_dir: Path, extra_defaults: list[str] | None = None) -> GitRepos:
        """Create a manager for a custom repos directory.

        Args:
            repos_dir: Directory holding the repo checkouts.
            extra_defaults: Additional addresses treated as the default repo.

        Returns:
            Configured GitRepos instance.
        """
        return cls(repos_dir=repos_dir, extra_defaults=extra_defaults)

    @classmethod
    def create_default(cls) -> GitRepos:
        """Create a manager for ~/.cocoapods/repos.

        Returns:
            GitRepos configured with default paths.
        """
        return cls()

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------

    async def enumerate(self) -> list[SourceRepo]:
        """Enumerate repositories without blocking the event loop."""
        return await asyncio.to_thread(self.list_repos)

    def list_repos(self) -> list[SourceRepo]:
        """List every spec repo in the repos directory, sorted by name.

        Returns:
            One SourceRepo per recognised checkout. A missing repos
            directory yields an empty list.
        """
        if not self.repos_dir.is_dir():
            logger.debug("Repos directory %s does not exist", self.repos_dir)
            return []

        repos: list[SourceRepo] = []
        for path in sorted(p for p in self.repos_dir.iterdir() if p.is_dir()):
            address = self.read_address(path)
            if address is None:
                continue
            repos.append(
                SourceRepo.from_address(
                    address,
                    display_name=path.name,
                    path=path,
                    extra_defaults=self.extra_defaults,
                )
            )
        return repos

    def read_address(self, path: Path) -> str | None:
        """Read the canonical address of a checkout.

        Args:
            path: Repo directory.

        Returns:
            The CDN URL or the git remote URL, or None if the directory is
            not a spec repo.
        """
        cdn_file = path / CDN_URL_FILE
        if cdn_file.is_file():
            address = cdn_file.read_text(encoding="utf-8").strip()
            return address or None

        if not (path / ".git").exists():
            logger.debug("Skipping %s: not a git repository", path)
            return None

        try:
            repo = Repo(path)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            logger.debug("Skipping %s: %s", path, e)
            return None

        remote = tracked_remote(repo)
        if remote is None:
            logger.debug("Skipping %s: no remotes", path)
            return None
        return remote.url

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    async def run_update(self, repo: SourceRepo) -> None:
        """Update one repository without blocking the event loop.

        Args:
            repo: Repo snapshot; its path locates the checkout.

        Raises:
            GitOpsError: If the repo has no checkout or git fails.
        """
        if repo.path is None:
            raise GitOpsError(f"No local checkout for {repo.address}")
        if (repo.path / CDN_URL_FILE).is_file():
            logger.info("%s is served from a CDN and refreshes on demand", repo.display_name)
            return
        await asyncio.to_thread(self.fetch_and_pull, repo.path)

    def fetch_and_pull(self, path: Path) -> Path:
        """Fetch from the remote and pull the checked out branch.

        Args:
            path: Path to local repository.

        Returns:
            Path to the repository.

        Raises:
            GitOpsError: If fetch or pull fails.
        """
        try:
            repo = Repo(path)
            remote = tracked_remote(repo)
            if remote is None:
                raise GitOpsError(f"Repository at {path} has no remote")
            remote.fetch()
            repo.git.pull()
        except (GitCommandError, InvalidGitRepositoryError, NoSuchPathError) as e:
            raise GitOpsError(f"Git operation failed: {e}") from e
        logger.debug("Pulled %s", path)
        return path
