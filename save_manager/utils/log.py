"""Debug output for save-manager."""

from __future__ import annotations

import sys

from .env import is_debug_mode


def log_debug(message: str) -> None:
    """Log debug message to stderr.

    Only outputs if SAVE_MANAGER_DEBUG environment variable is set.
    """
    if is_debug_mode():
        print(f"[save-manager] {message}", file=sys.stderr)
