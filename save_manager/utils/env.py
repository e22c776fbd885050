"""Environment utilities for save-manager."""

from __future__ import annotations

import os
import sys
from pathlib import Path


APP_SLUG = "save-manager"


def is_debug_mode() -> bool:
    """Check if debug mode is enabled.

    Returns:
        True if SAVE_MANAGER_DEBUG is set to a truthy value
    """
    val = os.environ.get("SAVE_MANAGER_DEBUG", "").lower()
    return val in ("1", "true", "yes", "on")


def get_home_dir() -> Path:
    """Get user home directory."""
    return Path.home()


def get_platform_data_dir() -> Path:
    """Get the per-user data root for this platform.

    Honors XDG_DATA_HOME everywhere, then APPDATA on Windows and
    ~/Library/Application Support on macOS. Falls back to ~/.local/share.
    """
    xdg = os.environ.get("XDG_DATA_HOME", "").strip()
    if xdg:
        return Path(xdg).expanduser()

    if sys.platform.startswith("win"):
        appdata = os.environ.get("APPDATA", "").strip()
        if appdata:
            return Path(appdata)
        return get_home_dir() / "AppData" / "Roaming"

    if sys.platform == "darwin":
        return get_home_dir() / "Library" / "Application Support"

    return get_home_dir() / ".local" / "share"


def get_default_data_dir() -> Path:
    """Get the default save-manager data directory.

    Returns:
        Path holding data.json and every snapshot slot
    """
    return get_platform_data_dir() / APP_SLUG


def get_env_data_dir() -> Path | None:
    """Data directory override from SAVE_MANAGER_DATA_DIR, if set."""
    val = os.environ.get("SAVE_MANAGER_DATA_DIR", "").strip()
    return Path(val).expanduser() if val else None


def get_config_dir() -> Path:
    """Get the save-manager config directory (~/.config/save-manager)."""
    xdg = os.environ.get("XDG_CONFIG_HOME", "").strip()
    base = Path(xdg).expanduser() if xdg else get_home_dir() / ".config"
    return base / APP_SLUG
