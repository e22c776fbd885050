"""Configuration loader for save-manager.

Handles loading and merging configuration from the user config file and
resolving where the data directory lives.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ..utils.env import get_config_dir, get_default_data_dir, get_env_data_dir
from ..utils.fs import safe_json_load
from .types import SaveManagerConfig


class ConfigLoader:
    """Loads and manages save-manager configuration."""

    CONFIG_NAME = "config.json"

    def __init__(self, config_dir: Path | None = None):
        """Initialize config loader.

        Args:
            config_dir: Directory holding config.json (defaults to ~/.config/save-manager)
        """
        self.config_dir = Path(config_dir) if config_dir else get_config_dir()
        self._config: SaveManagerConfig | None = None

    @property
    def config_path(self) -> Path:
        return self.config_dir / self.CONFIG_NAME

    @property
    def config(self) -> SaveManagerConfig:
        """Get loaded configuration, loading if necessary."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def load(self) -> SaveManagerConfig:
        """Load configuration.

        Priority (highest to lowest):
        1. User config (~/.config/save-manager/config.json)
        2. Default values

        Returns:
            Merged SaveManagerConfig
        """
        merged: dict[str, Any] = SaveManagerConfig().to_dict()

        if self.config_path.exists():
            user_data = safe_json_load(self.config_path, {})
            if isinstance(user_data, dict):
                merged = self._deep_merge(merged, user_data)

        return SaveManagerConfig.from_dict(merged)

    def resolve_data_dir(self, override: Path | str | None = None) -> Path:
        """Decide which data directory this invocation uses.

        Priority: explicit override, SAVE_MANAGER_DATA_DIR, config
        `storage.dataDir`, then the platform data directory.
        """
        if override:
            return Path(override).expanduser()

        env_dir = get_env_data_dir()
        if env_dir is not None:
            return env_dir

        if self.config.data_dir:
            return Path(self.config.data_dir).expanduser()

        return get_default_data_dir()

    @staticmethod
    def _deep_merge(base: dict, override: dict[str, Any]) -> dict:
        """Deep merge two dictionaries.

        Args:
            base: Base dictionary
            override: Dictionary to merge (takes precedence)

        Returns:
            Merged dictionary
        """
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = ConfigLoader._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
