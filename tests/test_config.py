"""Tests for config module."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from source_repos.config import CONFIG_DIR, ConfigManager, Settings
from source_repos.gitops import REPOS_DIR


@pytest.fixture
def temp_config(temp_config_dir: Path) -> ConfigManager:
    """Create a config manager with a temporary directory."""
    return ConfigManager.create(temp_config_dir)


class TestSettings:
    """Tests for Settings model."""

    def test_default_values(self) -> None:
        """Test Settings has correct defaults."""
        settings = Settings()
        assert settings.repos_dir == REPOS_DIR
        assert settings.podfile == Path("Podfile")
        assert settings.extra_default_addresses == []

    def test_aliases(self) -> None:
        """Test camelCase keys are accepted."""
        settings = Settings.model_validate(
            {"reposDir": "/tmp/repos", "extraDefaultAddresses": ["https://x/specs"]}
        )
        assert settings.repos_dir == Path("/tmp/repos")
        assert settings.extra_default_addresses == ["https://x/specs"]


class TestConfigManager:
    """Tests for ConfigManager."""

    def test_default_config_dir(self) -> None:
        """Test default config directory."""
        assert ConfigManager.create_default().config_dir == CONFIG_DIR

    def test_load_missing_file(self, tmp_path: Path) -> None:
        """Test defaults are returned when no file exists."""
        config = ConfigManager.create(tmp_path / "missing")
        assert config.load() == Settings()

    def test_save_and_load(self, temp_config: ConfigManager, tmp_path: Path) -> None:
        """Test settings survive a round trip through disk."""
        settings = Settings(repos_dir=tmp_path / "repos", podfile=tmp_path / "Podfile")
        temp_config.save(settings)

        assert temp_config.load() == settings

    def test_saved_with_aliases(self, temp_config: ConfigManager) -> None:
        """Test the file uses camelCase keys."""
        temp_config.save(Settings())
        data = json.loads(temp_config.config_file.read_text())
        assert "reposDir" in data
        assert "extraDefaultAddresses" in data

    def test_save_creates_directory(self, tmp_path: Path) -> None:
        """Test save creates the config directory."""
        config = ConfigManager.create(tmp_path / "new")
        config.save(Settings())
        assert config.config_file.exists()

    def test_set_repos_dir(self, temp_config: ConfigManager, tmp_path: Path) -> None:
        """Test setting a path value."""
        settings = temp_config.set_value("repos-dir", str(tmp_path / "repos"))
        assert settings.repos_dir == tmp_path / "repos"
        assert temp_config.load().repos_dir == tmp_path / "repos"

    def test_set_default_addresses(self, temp_config: ConfigManager) -> None:
        """Test list values are comma-separated."""
        temp_config.set_value("default-addresses", "https://a/specs, https://b/specs,")
        assert temp_config.load().extra_default_addresses == [
            "https://a/specs",
            "https://b/specs",
        ]

    def test_set_unknown_key(self, temp_config: ConfigManager) -> None:
        """Test unknown keys are rejected."""
        with pytest.raises(ValueError, match="Unknown configuration key"):
            temp_config.set_value("colour", "blue")
