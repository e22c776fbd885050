"""Persistence of the save-manager state document.

The whole Repository is read once at the start of a command and written
back wholesale at the end; nothing is updated incrementally.
"""

from __future__ import annotations

import json
from pathlib import Path

from ..utils.fs import atomic_write, ensure_dir
from ..utils.log import log_debug
from .errors import FilesystemOperationFailed
from .models import Repository


class StateStore:
    """Reads and writes data.json inside the data directory."""

    STATE_NAME = "data.json"

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir)

    @property
    def state_path(self) -> Path:
        return self.data_dir / self.STATE_NAME

    def load(self) -> Repository:
        """Load the repository, starting empty on first run.

        Only a missing or empty state file counts as a first run. A file that
        cannot be read or parsed raises, so a later write cannot replace it.

        Raises:
            FilesystemOperationFailed: If the state file is unreadable, corrupt
                or written by a newer format version
        """
        try:
            ensure_dir(self.data_dir)
        except OSError as e:
            raise FilesystemOperationFailed("create", self.data_dir, e.strerror or str(e)) from e

        if not self.state_path.exists():
            return Repository()

        try:
            text = self.state_path.read_text(encoding="utf-8")
        except OSError as e:
            raise FilesystemOperationFailed("read", self.state_path, e.strerror or str(e)) from e

        if not text.strip():
            return Repository()

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            log_debug(f"Cannot parse {self.state_path}: {e}")
            raise FilesystemOperationFailed("read", self.state_path, "state file is corrupt") from e
        if not isinstance(data, dict):
            raise FilesystemOperationFailed("read", self.state_path, "state file is corrupt")

        version = data.get("version", Repository.FORMAT_VERSION)
        if not isinstance(version, int) or version > Repository.FORMAT_VERSION:
            raise FilesystemOperationFailed(
                "read", self.state_path, f"unsupported state version {version!r}"
            )

        repository = Repository.from_dict(data)
        log_debug(f"Loaded {len(repository.categories)} categories from {self.state_path}")
        return repository

    def save(self, repository: Repository) -> None:
        """Replace the state file with ``repository``."""
        try:
            atomic_write(self.state_path, json.dumps(repository.to_dict(), indent=2), mode="w")
        except OSError as e:
            raise FilesystemOperationFailed("write", self.state_path, e.strerror or str(e)) from e
