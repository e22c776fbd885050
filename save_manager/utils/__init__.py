"""Utility modules for save-manager."""

from .fs import (
    atomic_write,
    copy_path,
    ensure_dir,
    move_path,
    path_exists,
    remove_path,
    safe_json_load,
)
from .env import (
    get_config_dir,
    get_default_data_dir,
    get_env_data_dir,
    get_home_dir,
    get_platform_data_dir,
    is_debug_mode,
)
from .log import log_debug

__all__ = [
    "atomic_write",
    "copy_path",
    "ensure_dir",
    "move_path",
    "path_exists",
    "remove_path",
    "safe_json_load",
    "get_config_dir",
    "get_default_data_dir",
    "get_env_data_dir",
    "get_home_dir",
    "get_platform_data_dir",
    "is_debug_mode",
    "log_debug",
]
