"""save-manager controller - main orchestrator.

Each command loads the repository once, validates and resolves references,
lets the snapshot engine change disk, then persists the repository once.
Nothing is persisted when a command fails before its disk steps complete.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable

from ..config import ConfigLoader, SaveManagerConfig
from ..utils.log import log_debug
from . import ledger
from .errors import (
    CategoryAlreadyExists,
    FilesystemOperationFailed,
    InvalidCategoryName,
    InvalidTrackedPath,
    NoSavesInCategory,
    SaveManagerError,
    SourcePathMissing,
)
from .models import Category, Repository, Save
from .references import AUTOSAVE, parse_reference, resolve, resolve_many, resolve_save
from .snapshot_engine import Clock, SlotFilesystem, SnapshotEngine
from .state_store import StateStore


@dataclass
class ManagerStatus:
    """Status of the save-manager data directory."""
    data_dir: str
    state_file: str
    category_count: int
    active_category: str | None
    save_count: int
    has_autosave: bool


class SaveManagerController:
    """Main controller for save-manager commands."""

    def __init__(
        self,
        data_dir: Path | str | None = None,
        config_loader: ConfigLoader | None = None,
        fs: SlotFilesystem | None = None,
        clock: Clock | None = None,
    ):
        """Initialize controller.

        Args:
            data_dir: Data directory override (see ConfigLoader.resolve_data_dir)
            config_loader: Configuration source
            fs: Filesystem capability handed to the snapshot engine
            clock: Source of timestamps
        """
        self._config_loader = config_loader or ConfigLoader()
        self.data_dir = self._config_loader.resolve_data_dir(data_dir)
        self.clock: Clock = clock or datetime.now
        self.state = StateStore(self.data_dir)
        self.engine = SnapshotEngine(self.data_dir, fs=fs, clock=self.clock)

    @property
    def config(self) -> SaveManagerConfig:
        """Get current configuration."""
        return self._config_loader.config

    # Categories

    def create(self, name: str, paths: Iterable[Path | str]) -> dict[str, Any]:
        """Create a category tracking ``paths``.

        Args:
            name: New category name
            paths: Source paths; each must exist and is stored absolute

        Returns:
            Result dictionary
        """
        def action(repo: Repository) -> dict[str, Any]:
            self._validate_category_name(name)
            if repo.find_category(name) is not None:
                raise CategoryAlreadyExists(name)

            tracked = [str(Path(p).expanduser().resolve()) for p in paths]
            if not tracked:
                raise SourcePathMissing("(no path given)")
            for path in tracked:
                if not self.engine.fs.exists(Path(path)):
                    raise SourcePathMissing(path)
            self._check_overlaps(tracked)

            repo.add_category(Category(name=name, tracked_paths=tracked))
            activated = False
            if repo.active_category is None and self.config.activate_on_create:
                repo.active_category = name
                activated = True

            return {"name": name, "paths": tracked, "activated": activated}

        return self._run(action)

    def delete(self, name: str) -> dict[str, Any]:
        """Delete a category with every one of its slots."""
        def action(repo: Repository) -> dict[str, Any]:
            category = repo.get_category(name)
            was_active = repo.active_category == name
            self.engine.drop_category(category)
            repo.remove_category(name)
            return {"name": name, "wasActive": was_active}

        return self._run(action)

    def switch(self, name: str) -> dict[str, Any]:
        """Make ``name`` the active category."""
        def action(repo: Repository) -> dict[str, Any]:
            repo.get_category(name)
            repo.active_category = name
            return {"name": name}

        return self._run(action)

    def rename(self, new_name: str) -> dict[str, Any]:
        """Rename the active category, moving all of its slots."""
        def action(repo: Repository) -> dict[str, Any]:
            category = repo.active()
            self._validate_category_name(new_name)
            if repo.find_category(new_name) is not None:
                raise CategoryAlreadyExists(new_name)

            old_name = category.name
            self.engine.rename_category(category, new_name)
            category.name = new_name
            if repo.active_category == old_name:
                repo.active_category = new_name
            return {"oldName": old_name, "name": new_name}

        return self._run(action)

    def list_categories(self) -> dict[str, Any]:
        """List every category, marking the active one."""
        def action(repo: Repository) -> dict[str, Any]:
            return {
                "active": repo.active_category,
                "categories": [
                    {
                        "name": c.name,
                        "active": c.name == repo.active_category,
                        "paths": list(c.tracked_paths),
                        "saveCount": len(c.saves),
                    }
                    for c in repo.categories
                ],
            }

        return self._run(action, persist=False)

    def list_versions(self) -> dict[str, Any]:
        """List the versions of the active category.

        Not having an active category is reported, not treated as an error.
        """
        def action(repo: Repository) -> dict[str, Any]:
            if repo.active_category is None:
                return {"category": None, "autosave": None, "versions": []}
            category = repo.active()
            return {
                "category": category.name,
                "autosave": category.autosave_marker,
                "versions": [
                    {
                        "position": position,
                        "name": save.display_name,
                        "index": save.real_index,
                        "createdAt": save.created_at,
                    }
                    for position, save in enumerate(category.saves)
                ],
            }

        return self._run(action, persist=False)

    # Versions

    def save(self, name: str | None = None) -> dict[str, Any]:
        """Snapshot the active category's tracked paths as a new version."""
        def action(repo: Repository) -> dict[str, Any]:
            category = repo.active()
            save = ledger.register(category, name, now=self.clock())
            self.engine.capture(category, save)
            return {
                "category": category.name,
                "name": save.display_name,
                "position": ledger.position_of(category, save),
                "index": save.real_index,
            }

        return self._run(action)

    def load(self, token: str | None = None) -> dict[str, Any]:
        """Load a version (newest when ``token`` is None) or rotate the autosave."""
        def action(repo: Repository) -> dict[str, Any]:
            category = repo.active()
            # Even the autosave needs at least one version in the category
            if not category.saves:
                raise NoSavesInCategory(category.name)

            if token is None:
                target = category.saves[-1]
            else:
                target = resolve(category, parse_reference(token), allow_auto=True)

            if target is AUTOSAVE:
                marker = self.engine.rotate_autosave(category)
                return {"category": category.name, "autosave": True, "marker": marker}

            marker = self.engine.restore(category, target)
            return {
                "category": category.name,
                "autosave": False,
                "name": self._describe(category, target),
                "position": ledger.position_of(category, target),
                "marker": marker,
            }

        return self._run(action)

    def overwrite(self, token: str) -> dict[str, Any]:
        """Replace a version's content with the current tracked paths."""
        def action(repo: Repository) -> dict[str, Any]:
            category = repo.active()
            if not category.saves:
                raise NoSavesInCategory(category.name)
            save = resolve_save(category, token)
            self.engine.refresh(category, save)
            return {
                "category": category.name,
                "name": self._describe(category, save),
                "position": ledger.position_of(category, save),
                "index": save.real_index,
                "createdAt": save.created_at,
            }

        return self._run(action)

    def remove(self, tokens: Iterable[str]) -> dict[str, Any]:
        """Remove one or more versions.

        Tokens are resolved in order, each against the sequence left by the
        ones before it, and all of them are validated before disk changes.
        """
        tokens = list(tokens)

        def action(repo: Repository) -> dict[str, Any]:
            category = repo.active()
            if not category.saves:
                raise NoSavesInCategory(category.name)

            targets = resolve_many(category, tokens)
            removed: list[str] = []
            for save in targets:
                label = self._describe(category, save)
                try:
                    self.engine.discard(category, save)
                except FilesystemOperationFailed:
                    if removed:
                        # Record what is already gone from disk before failing
                        self.state.save(repo)
                    raise
                ledger.remove(category, save)
                removed.append(label)

            return {"category": category.name, "removed": removed}

        return self._run(action)

    # Diagnostics

    def get_status(self) -> ManagerStatus:
        """Get data directory status.

        Raises:
            SaveManagerError: If the state file cannot be loaded
        """
        repo = self.state.load()
        active = repo.find_category(repo.active_category) if repo.active_category else None
        return ManagerStatus(
            data_dir=str(self.data_dir),
            state_file=str(self.state.state_path),
            category_count=len(repo.categories),
            active_category=repo.active_category,
            save_count=len(active.saves) if active else 0,
            has_autosave=bool(active and active.has_autosave),
        )

    def validate_system(self) -> dict[str, Any]:
        """Compare on-disk slots with the ledger.

        Returns:
            Validation result with any issues found

        Raises:
            SaveManagerError: If the state file cannot be loaded
        """
        repo = self.state.load()
        issues: list[str] = []
        expected: set[str] = set()

        for category in repo.categories:
            for path in category.tracked_paths:
                if not self.engine.fs.exists(Path(path)):
                    issues.append(f"{category.name}: tracked path missing: {path}")
            for slot in self.engine.expected_slots(category):
                expected.add(slot.name)
                if not self.engine.fs.exists(slot):
                    issues.append(f"{category.name}: slot missing: {slot.name}")

        if self.data_dir.is_dir():
            for entry in sorted(os.listdir(self.data_dir)):
                if entry == StateStore.STATE_NAME or entry.startswith("."):
                    continue
                if entry not in expected:
                    issues.append(f"Unknown entry in data directory: {entry}")

        return {"valid": not issues, "issues": issues}

    # Helpers

    def _run(
        self,
        action: Callable[[Repository], dict[str, Any]],
        persist: bool = True,
    ) -> dict[str, Any]:
        try:
            repo = self.state.load()
            result = action(repo)
            if persist:
                self.state.save(repo)
        except SaveManagerError as e:
            log_debug(f"{type(e).__name__}: {e}")
            return {"success": False, "error": str(e), "errorType": type(e).__name__}

        return {"success": True, **result}

    @staticmethod
    def _describe(category: Category, save: Save) -> str:
        """Display name, or current position for unnamed saves."""
        if save.display_name is not None:
            return save.display_name
        return str(ledger.position_of(category, save))

    def _check_overlaps(self, tracked: list[str]) -> None:
        """Reject tracked paths that share content with each other or with storage."""
        storage = [
            self.data_dir.expanduser().resolve(),
            self.engine.holding_dir.expanduser().resolve(),
        ]
        for i, path in enumerate(tracked):
            candidate = Path(path)
            for other in tracked[:i]:
                if candidate == Path(other):
                    raise InvalidTrackedPath(path, "listed more than once")
                if candidate.is_relative_to(other) or Path(other).is_relative_to(candidate):
                    raise InvalidTrackedPath(path, f"overlaps tracked path {other}")
            for root in storage:
                if candidate.is_relative_to(root) or root.is_relative_to(candidate):
                    raise InvalidTrackedPath(path, f"overlaps save-manager storage {root}")

    @staticmethod
    def _validate_category_name(name: str) -> None:
        if not name or name in (".", "..") or "/" in name or "\\" in name or os.sep in name:
            raise InvalidCategoryName(name)
