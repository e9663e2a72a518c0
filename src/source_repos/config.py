"""Settings management."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from source_repos.gitops import REPOS_DIR

# Default settings location
CONFIG_DIR = Path.home() / ".source-repos"

# CLI key -> Settings field
SETTABLE_KEYS = {
    "repos-dir": "repos_dir",
    "podfile": "podfile",
    "default-addresses": "extra_default_addresses",
}


class Settings(BaseModel):
    """User settings."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = "1.0"
    repos_dir: Path = Field(default=REPOS_DIR, alias="reposDir")
    podfile: Path = Path("Podfile")
    extra_default_addresses: list[str] = Field(
        default_factory=list, alias="extraDefaultAddresses"
    )


class ConfigManager:
    """Loads and saves settings."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize the config manager.

        Args:
            config_dir: Directory for the settings file. Defaults to ~/.source-repos.

        Note:
            Prefer using factory methods `create()` or `create_default()` for construction.
        """
        self.config_dir = config_dir or CONFIG_DIR
        self.config_file = self.config_dir / "config.json"

    @classmethod
    def create(cls, config_dir: Path) -> ConfigManager:
        """Create a config manager with a custom directory."""
        return cls(config_dir=config_dir)

    @classmethod
    def create_default(cls) -> ConfigManager:
        """Create a config manager using ~/.source-repos."""
        return cls()

    def load(self) -> Settings:
        """Load settings from disk.

        Returns:
            Saved settings, or defaults when no file exists.
        """
        if not self.config_file.exists():
            return Settings()

        data = json.loads(self.config_file.read_text())
        return Settings.model_validate(data)

    def save(self, settings: Settings) -> None:
        """Save settings to disk.

        Args:
            settings: Settings to save.
        """
        self.config_dir.mkdir(parents=True, exist_ok=True)
        data = settings.model_dump(mode="json", by_alias=True)
        self.config_file.write_text(json.dumps(data, indent=2))

    def set_value(self, key: str, value: str) -> Settings:
        """Set one setting from its CLI string form and save.

        Args:
            key: One of SETTABLE_KEYS.
            value: Raw value; lists are comma-separated.

        Returns:
            Updated settings.

        Raises:
            ValueError: If the key is unknown.
        """
        if key not in SETTABLE_KEYS:
            raise ValueError(f"Unknown configuration key: {key}")

        settings = self.load()
        field_name = SETTABLE_KEYS[key]
        if field_name == "extra_default_addresses":
            parsed: object = [v.strip() for v in value.split(",") if v.strip()]
        else:
            parsed = Path(value).expanduser()
        settings = settings.model_copy(update={field_name: parsed})
        self.save(settings)
        return settings
