"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from source_repos.catalog import RepoCatalog
from source_repos.coordinator import RefreshCoordinator
from source_repos.models import SourceRepo

DEFAULT_ADDRESS = "https://github.com/CocoaPods/Specs.git"
PRIVATE_ADDRESS = "https://github.com/acme/private-specs.git"


def _make_repo(address: str, name: str | None = None, **kwargs: object) -> SourceRepo:
    """Build a SourceRepo with derived display fields."""
    repo = SourceRepo.from_address(address, display_name=name)
    if kwargs:
        repo = repo.model_copy(update=kwargs)
    return repo


@pytest.fixture
def make_repo():
    """Factory for SourceRepo instances."""
    return _make_repo


@pytest.fixture
def temp_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Override home directory for testing."""
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    return tmp_path


@pytest.fixture
def temp_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory."""
    config_dir = tmp_path / ".source-repos"
    config_dir.mkdir(parents=True)
    return config_dir


@pytest.fixture
def temp_repos_dir(tmp_path: Path) -> Path:
    """Create a temporary spec repos directory."""
    repos_dir = tmp_path / ".cocoapods" / "repos"
    repos_dir.mkdir(parents=True)
    return repos_dir


# ============================================================================
# Catalog Fixtures
# ============================================================================


@pytest.fixture
def default_repo() -> SourceRepo:
    """The implicit CocoaPods spec repo."""
    return _make_repo(DEFAULT_ADDRESS, "master")


@pytest.fixture
def private_repo() -> SourceRepo:
    """A private spec repo."""
    return _make_repo(PRIVATE_ADDRESS, "acme")


@pytest.fixture
def catalog() -> Iterator[RepoCatalog]:
    """Create an empty catalog and stop its delivery thread afterwards."""
    catalog = RepoCatalog.create()
    yield catalog
    catalog.close(timeout=2)


@pytest.fixture
def mock_enumerator(default_repo: SourceRepo, private_repo: SourceRepo) -> MagicMock:
    """Create a mock RepoEnumerator returning two repos."""
    enumerator = MagicMock()
    enumerator.enumerate = AsyncMock(return_value=[default_repo, private_repo])
    return enumerator


@pytest.fixture
def mock_updater() -> MagicMock:
    """Create a mock RepoUpdateExecutor that always succeeds."""
    updater = MagicMock()
    updater.run_update = AsyncMock(return_value=None)
    return updater


@pytest.fixture
def coordinator(
    catalog: RepoCatalog, mock_enumerator: MagicMock, mock_updater: MagicMock
) -> RefreshCoordinator:
    """Create a coordinator over the test catalog."""
    return RefreshCoordinator(catalog, enumerator=mock_enumerator, updater=mock_updater)
