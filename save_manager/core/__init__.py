"""Core modules for save-manager."""

from .controller import SaveManagerController
from .errors import SaveManagerError
from .models import Category, Repository, Save
from .snapshot_engine import LocalFilesystem, SnapshotEngine
from .state_store import StateStore

__all__ = [
    "SaveManagerController",
    "SaveManagerError",
    "Category",
    "Repository",
    "Save",
    "LocalFilesystem",
    "SnapshotEngine",
    "StateStore",
]
