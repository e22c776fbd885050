"""Data model for save-manager state.

A Repository holds categories; a Category tracks one or more source paths
and an ordered list of saves; a Save is one numbered snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .errors import CategoryNotFound, NoActiveCategory


@dataclass
class Save:
    """One numbered version in a category."""
    real_index: int
    created_at: str
    display_name: str | None = None

    @property
    def label(self) -> str:
        return self.display_name if self.display_name is not None else str(self.real_index)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.display_name,
            "index": self.real_index,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Save:
        """Create from dictionary."""
        return cls(
            real_index=int(data.get("index", 0)),
            created_at=data.get("createdAt", ""),
            display_name=data.get("name"),
        )


@dataclass
class Category:
    """A named group of tracked paths and their saves."""
    name: str
    tracked_paths: list[str]
    saves: list[Save] = field(default_factory=list)
    autosave_marker: str | None = None
    next_index: int = 0

    @property
    def ordinals(self) -> range:
        """1-based ordinals of the tracked paths."""
        return range(1, len(self.tracked_paths) + 1)

    def tracked_path(self, ordinal: int) -> str:
        return self.tracked_paths[ordinal - 1]

    @property
    def has_autosave(self) -> bool:
        return self.autosave_marker is not None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "paths": list(self.tracked_paths),
            "saves": [save.to_dict() for save in self.saves],
            "autosave": self.autosave_marker,
            "nextIndex": self.next_index,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Category:
        """Create from dictionary."""
        saves = [Save.from_dict(s) for s in data.get("saves", []) if isinstance(s, dict)]
        next_index = int(data.get("nextIndex", 0))
        # Never hand out an index a live save already holds
        if saves:
            next_index = max(next_index, max(s.real_index for s in saves) + 1)
        return cls(
            name=data.get("name", ""),
            tracked_paths=[str(p) for p in data.get("paths", [])],
            saves=saves,
            autosave_marker=data.get("autosave"),
            next_index=next_index,
        )


@dataclass
class Repository:
    """All categories plus the active-category pointer."""
    active_category: str | None = None
    categories: list[Category] = field(default_factory=list)

    FORMAT_VERSION = 1

    def find_category(self, name: str) -> Category | None:
        for category in self.categories:
            if category.name == name:
                return category
        return None

    def get_category(self, name: str) -> Category:
        """Get a category by name.

        Raises:
            CategoryNotFound: If no category has that name
        """
        category = self.find_category(name)
        if category is None:
            raise CategoryNotFound(name)
        return category

    def active(self) -> Category:
        """Get the active category.

        Raises:
            NoActiveCategory: If no category is active
        """
        if self.active_category is None:
            raise NoActiveCategory()
        category = self.find_category(self.active_category)
        if category is None:
            raise NoActiveCategory()
        return category

    def add_category(self, category: Category) -> None:
        self.categories.append(category)

    def remove_category(self, name: str) -> Category:
        category = self.get_category(name)
        self.categories.remove(category)
        if self.active_category == name:
            self.active_category = None
        return category

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "version": self.FORMAT_VERSION,
            "active": self.active_category,
            "categories": [category.to_dict() for category in self.categories],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Repository:
        """Create from dictionary.

        A dangling active pointer is dropped rather than trusted.
        """
        categories = [
            Category.from_dict(c) for c in data.get("categories", []) if isinstance(c, dict)
        ]
        active = data.get("active")
        names = {c.name for c in categories}
        return cls(
            active_category=active if isinstance(active, str) and active in names else None,
            categories=categories,
        )
