"""File system utilities for save-manager.

Provides atomic writes, safe JSON loading, and the tree-level copy, move
and remove helpers that snapshot slots are built from.
"""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any


def atomic_write(file_path: Path | str, content: str | bytes, mode: str = "w") -> None:
    """Write content atomically using tempfile + rename pattern.

    Args:
        file_path: Target file path
        content: Content to write
        mode: Write mode ('w' for text, 'wb' for binary)
    """
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file must live in the target directory for os.replace to be atomic
    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp"
    )

    try:
        with os.fdopen(fd, mode) as f:
            f.write(content)
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def ensure_dir(dir_path: Path | str) -> Path:
    """Ensure directory exists, creating it if necessary."""
    path = Path(dir_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def safe_json_load(file_path: Path | str, default: Any = None) -> Any:
    """Safely load JSON file with fallback.

    Args:
        file_path: Path to JSON file
        default: Default value if file doesn't exist, is empty or is invalid

    Returns:
        Parsed JSON or default value
    """
    try:
        with open(file_path) as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError):
        return default if default is not None else {}


def path_exists(path: Path | str) -> bool:
    """True for files, directories and dangling symlinks alike."""
    return os.path.lexists(path)


def copy_path(src: Path | str, dst: Path | str) -> None:
    """Copy a directory tree or a single file to ``dst``.

    Symlinks inside a tree are copied as links, not followed.
    """
    src_path = Path(src)
    dst_path = Path(dst)
    dst_path.parent.mkdir(parents=True, exist_ok=True)
    if src_path.is_dir() and not src_path.is_symlink():
        shutil.copytree(src_path, dst_path, symlinks=True)
    else:
        shutil.copy2(src_path, dst_path, follow_symlinks=False)


def move_path(src: Path | str, dst: Path | str) -> None:
    """Rename ``src`` to ``dst``, falling back to copy+delete across volumes."""
    dst_path = Path(dst)
    dst_path.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(src), str(dst_path))


def remove_path(path: Path | str) -> None:
    """Remove a directory tree or a single file."""
    target = Path(path)
    if target.is_dir() and not target.is_symlink():
        shutil.rmtree(target)
    else:
        target.unlink()
