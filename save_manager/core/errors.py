"""Errors raised by save-manager core operations.

Every user-facing failure is one of these. The controller turns them into
``{"success": False, "error": ...}`` results; nothing below it prints.
"""

from __future__ import annotations

from pathlib import Path


class SaveManagerError(Exception):
    """Base class for all save-manager failures."""


class CategoryNotFound(SaveManagerError):
    def __init__(self, name: str):
        super().__init__(f"Category does not exist: {name}")
        self.name = name


class CategoryAlreadyExists(SaveManagerError):
    def __init__(self, name: str):
        super().__init__(f"Category already exists: {name}")
        self.name = name


class InvalidCategoryName(SaveManagerError):
    def __init__(self, name: str):
        super().__init__(f"Invalid category name: {name!r}")
        self.name = name


class SaveNotFound(SaveManagerError):
    def __init__(self, reference: str):
        super().__init__(f"Save does not exist: {reference}")
        self.reference = reference


class SaveAlreadyExists(SaveManagerError):
    def __init__(self, name: str):
        super().__init__(f"Save by this name already exists: {name}")
        self.name = name


class InvalidSaveName(SaveManagerError):
    def __init__(self, name: str, reason: str):
        super().__init__(f"Invalid save name {name!r}: {reason}")
        self.name = name
        self.reason = reason


class NoActiveCategory(SaveManagerError):
    def __init__(self) -> None:
        super().__init__("No current category")


class NoSavesInCategory(SaveManagerError):
    def __init__(self, category: str):
        super().__init__(f"No saves in category {category}")
        self.category = category


class NoAutosaveAvailable(SaveManagerError):
    def __init__(self, category: str):
        super().__init__(f"No autosave in category {category}")
        self.category = category


class SourcePathMissing(SaveManagerError):
    def __init__(self, path: Path | str):
        super().__init__(f"Path does not exist: {path}")
        self.path = str(path)


class InvalidTrackedPath(SaveManagerError):
    def __init__(self, path: Path | str, reason: str):
        super().__init__(f"Cannot track {path}: {reason}")
        self.path = str(path)
        self.reason = reason


class FilesystemOperationFailed(SaveManagerError):
    """A copy, move or remove on a slot or source path failed."""

    def __init__(self, operation: str, path: Path | str, reason: str = ""):
        message = f"Failed to {operation} {path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.operation = operation
        self.path = str(path)
        self.reason = reason
