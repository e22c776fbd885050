"""Snapshot engine for save-manager.

Realizes ledger changes on disk. Every category's slots live flat in the
data directory:

    {category}_{ordinal}_{real_index}   numbered version
    {category}_{ordinal}_auto           autosave

Per ordinal there are three places content can sit: the live source tree
(S), a version slot (V) and the autosave slot (A). Transitions:

    save N       evict stale V; copy S -> V
    load N       evict A; move S -> A; copy V -> S
    load auto    move A -> T; move S -> A; move T -> S   (T = holding path)
    overwrite N  evict A; move V -> A; copy S -> V
    remove N     remove V
    delete       remove every V and A
    rename       move every V and A to the new category's slot names

Loading "auto" twice swaps back: the autosave always holds whatever the
tracked paths contained before the most recent load.

Each operation checks its preconditions for every ordinal before touching
disk, then applies steps ordinal by ordinal. There is no rollback across
ordinals once mutation has started, except that a failed save removes the
slots it already wrote.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable, Protocol

from ..utils.fs import copy_path, move_path, path_exists, remove_path
from ..utils.log import log_debug
from .errors import FilesystemOperationFailed, NoAutosaveAvailable, SourcePathMissing
from .models import Category, Save


Clock = Callable[[], datetime]


class SlotFilesystem(Protocol):
    """Filesystem capability the engine works through."""

    def exists(self, path: Path) -> bool: ...

    def copy(self, src: Path, dst: Path) -> None: ...

    def move(self, src: Path, dst: Path) -> None: ...

    def remove(self, path: Path) -> None: ...


class LocalFilesystem:
    """SlotFilesystem backed by the real disk."""

    def exists(self, path: Path) -> bool:
        return path_exists(path)

    def copy(self, src: Path, dst: Path) -> None:
        copy_path(src, dst)

    def move(self, src: Path, dst: Path) -> None:
        move_path(src, dst)

    def remove(self, path: Path) -> None:
        remove_path(path)


class SnapshotEngine:
    """Applies save/load/overwrite/remove transitions to snapshot slots."""

    AUTO_SUFFIX = "auto"
    HOLDING_SUFFIX = "rotate"

    def __init__(
        self,
        data_dir: Path | str,
        fs: SlotFilesystem | None = None,
        holding_dir: Path | str | None = None,
        clock: Clock | None = None,
    ):
        """Initialize snapshot engine.

        Args:
            data_dir: Directory holding every slot (and the state file)
            fs: Filesystem capability (defaults to the real disk)
            holding_dir: Where autosave rotation parks content; must not be
                data_dir. Defaults to a hidden sibling of data_dir.
            clock: Source of timestamps (defaults to datetime.now)
        """
        self.data_dir = Path(data_dir)
        self.fs: SlotFilesystem = fs or LocalFilesystem()
        if holding_dir is None:
            holding_dir = self.data_dir.parent / f".{self.data_dir.name}-{self.HOLDING_SUFFIX}"
        self.holding_dir = Path(holding_dir)
        self.clock: Clock = clock or datetime.now

    # Slot naming

    @staticmethod
    def slot_name(category_name: str, ordinal: int, index: int | str) -> str:
        return f"{category_name}_{ordinal}_{index}"

    def slot_path(self, category_name: str, ordinal: int, index: int) -> Path:
        return self.data_dir / self.slot_name(category_name, ordinal, index)

    def auto_slot_path(self, category_name: str, ordinal: int) -> Path:
        return self.data_dir / self.slot_name(category_name, ordinal, self.AUTO_SUFFIX)

    def holding_path(self, category_name: str, ordinal: int) -> Path:
        return self.holding_dir / self.slot_name(category_name, ordinal, self.HOLDING_SUFFIX)

    def expected_slots(self, category: Category) -> list[Path]:
        """Every slot the ledger says should exist for ``category``."""
        paths = [
            self.slot_path(category.name, ordinal, save.real_index)
            for save in category.saves
            for ordinal in category.ordinals
        ]
        if category.has_autosave:
            paths.extend(self.auto_slot_path(category.name, o) for o in category.ordinals)
        return paths

    def now(self) -> str:
        return self.clock().isoformat(timespec="seconds")

    # Transitions

    def capture(self, category: Category, save: Save) -> None:
        """Copy every tracked path into the slots of a freshly registered save."""
        self._require_sources(category)

        written: list[Path] = []
        try:
            for ordinal in category.ordinals:
                source = Path(category.tracked_path(ordinal))
                slot = self.slot_path(category.name, ordinal, save.real_index)
                self._evict(slot, "stale version slot")
                written.append(slot)
                self._apply("copy", source, self.fs.copy, source, slot)
        except FilesystemOperationFailed:
            for slot in written:
                self._discard_quietly(slot)
            raise

        log_debug(f"Captured {category.name} save {save.real_index} ({len(written)} path(s))")

    def restore(self, category: Category, save: Save) -> str:
        """Load a numbered save into the tracked paths.

        The current tracked content becomes the autosave; the version slot
        is left intact.

        Returns:
            The new autosave marker
        """
        self._require_sources(category)
        self._require_slots(
            self.slot_path(category.name, o, save.real_index) for o in category.ordinals
        )

        for ordinal in category.ordinals:
            source = Path(category.tracked_path(ordinal))
            slot = self.slot_path(category.name, ordinal, save.real_index)
            auto = self.auto_slot_path(category.name, ordinal)

            self._evict(auto, "previous autosave")
            self._apply("move", source, self.fs.move, source, auto)
            self._apply("copy", slot, self.fs.copy, slot, source)

        category.autosave_marker = self.now()
        log_debug(f"Loaded {category.name} save {save.real_index}; autosave at {category.autosave_marker}")
        return category.autosave_marker

    def rotate_autosave(self, category: Category) -> str:
        """Swap the autosave with the tracked paths using renames only.

        Returns:
            The refreshed autosave marker

        Raises:
            NoAutosaveAvailable: If the category has no autosave
        """
        if not category.has_autosave:
            raise NoAutosaveAvailable(category.name)
        self._require_sources(category)
        self._require_slots(self.auto_slot_path(category.name, o) for o in category.ordinals)

        for ordinal in category.ordinals:
            source = Path(category.tracked_path(ordinal))
            auto = self.auto_slot_path(category.name, ordinal)
            holding = self.holding_path(category.name, ordinal)

            self._evict(holding, "leftover holding path")
            self._apply("move", auto, self.fs.move, auto, holding)
            self._apply("move", source, self.fs.move, source, auto)
            self._apply("move", holding, self.fs.move, holding, source)

        category.autosave_marker = self.now()
        log_debug(f"Rotated autosave for {category.name}")
        return category.autosave_marker

    def refresh(self, category: Category, save: Save) -> str:
        """Overwrite a save's slots with the current tracked content.

        The save's previous content becomes the autosave. real_index and
        display_name are untouched; created_at is refreshed.

        Returns:
            The new autosave marker
        """
        self._require_sources(category)
        self._require_slots(
            self.slot_path(category.name, o, save.real_index) for o in category.ordinals
        )

        for ordinal in category.ordinals:
            source = Path(category.tracked_path(ordinal))
            slot = self.slot_path(category.name, ordinal, save.real_index)
            auto = self.auto_slot_path(category.name, ordinal)

            self._evict(auto, "previous autosave")
            self._apply("move", slot, self.fs.move, slot, auto)
            self._apply("copy", source, self.fs.copy, source, slot)

        stamp = self.now()
        save.created_at = stamp
        category.autosave_marker = stamp
        log_debug(f"Overwrote {category.name} save {save.real_index}")
        return stamp

    def discard(self, category: Category, save: Save) -> None:
        """Delete every slot of a save. The autosave is not touched."""
        for ordinal in category.ordinals:
            slot = self.slot_path(category.name, ordinal, save.real_index)
            if self.fs.exists(slot):
                self._apply("remove", slot, self.fs.remove, slot)
            else:
                log_debug(f"Version slot already gone: {slot}")

    def drop_category(self, category: Category) -> None:
        """Delete every numbered slot and the autosave of a category."""
        for save in category.saves:
            self.discard(category, save)

        for ordinal in category.ordinals:
            auto = self.auto_slot_path(category.name, ordinal)
            if self.fs.exists(auto):
                self._apply("remove", auto, self.fs.remove, auto)

    def rename_category(self, category: Category, new_name: str) -> None:
        """Move every slot of ``category`` to the names derived from ``new_name``.

        Only disk is touched; the caller renames the ledger entry.
        """
        moves: list[tuple[Path, Path]] = []
        for ordinal in category.ordinals:
            for save in category.saves:
                moves.append((
                    self.slot_path(category.name, ordinal, save.real_index),
                    self.slot_path(new_name, ordinal, save.real_index),
                ))
            if category.has_autosave:
                moves.append((
                    self.auto_slot_path(category.name, ordinal),
                    self.auto_slot_path(new_name, ordinal),
                ))

        self._require_slots(src for src, _ in moves)
        for _, dst in moves:
            if self.fs.exists(dst):
                raise FilesystemOperationFailed("rename onto", dst, "slot already exists")

        for src, dst in moves:
            self._apply("move", src, self.fs.move, src, dst)

        log_debug(f"Renamed {len(moves)} slot(s) from {category.name} to {new_name}")

    # Helpers

    def _apply(self, operation: str, path: Path, step: Callable[..., None], *args: Path) -> None:
        try:
            step(*args)
        except OSError as e:
            raise FilesystemOperationFailed(operation, path, e.strerror or str(e)) from e

    def _evict(self, path: Path, what: str) -> None:
        if self.fs.exists(path):
            log_debug(f"Evicting {what}: {path}")
            self._apply("remove", path, self.fs.remove, path)

    def _discard_quietly(self, path: Path) -> None:
        try:
            if self.fs.exists(path):
                self.fs.remove(path)
        except OSError as e:
            log_debug(f"Could not clean up {path}: {e}")

    def _require_sources(self, category: Category) -> None:
        for path in category.tracked_paths:
            if not self.fs.exists(Path(path)):
                raise SourcePathMissing(path)

    def _require_slots(self, slots) -> None:
        for slot in slots:
            if not self.fs.exists(slot):
                raise FilesystemOperationFailed("find", slot, "slot is missing")
